"""Point of interest — plaintext management fields plus encrypted search fields."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from saferadius.infrastructure.database import Base


class POI(Base):
    __tablename__ = "pois"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Ciphertext ("<key version>:<base64>") read by the search path
    encrypted_name = Column(Text, nullable=False)
    encrypted_lat = Column(Text, nullable=False)
    encrypted_lon = Column(Text, nullable=False)

    # Plaintext for owner/admin management views
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=False)
    area = Column(String(200), nullable=False)
    city = Column(String(200), nullable=False, index=True)
    postal_code = Column(String(20), nullable=False)
    category = Column(String(50), nullable=False, index=True)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    owner = relationship("User", back_populates="pois")

    def __repr__(self):
        return f"<POI {self.id} - {self.category}>"
