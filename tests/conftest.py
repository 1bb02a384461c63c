import os

# Must be set before saferadius reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENCRYPTION_KEY"] = "test-encryption-key"
os.environ["ENCRYPTION_KEY_VERSION"] = "v1"
os.environ["ENCRYPTION_KDF_ITERATIONS"] = "1000"
os.environ["ADMIN_SECRET_KEY"] = "test-admin-secret"
os.environ["GEOCODER_COUNTRY"] = "India"

import pytest
from fastapi.testclient import TestClient

from saferadius.application.services.auth_service import create_access_token, create_user
from saferadius.domain.geo import GeoPoint
from saferadius.domain.models.poi import POI
from saferadius.domain.models.user import User
from saferadius.domain.policy import Role
from saferadius.infrastructure.database import Base, SessionLocal, engine
from saferadius.infrastructure.repositories.poi_repository import SQLAlchemyPOIRepository
from saferadius.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from saferadius.interfaces.deps import get_cipher, get_geocoder
from saferadius.main import app

PASSWORD = "secret123"


class FakeGeocoder:
    def __init__(self, point=GeoPoint(12.9716, 77.5946)):
        self.point = point
        self.error = None
        self.calls = []

    async def geocode(self, area, city, postal_code, country):
        self.calls.append((area, city, postal_code, country))
        if self.error is not None:
            raise self.error
        return self.point


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def geocoder():
    fake = FakeGeocoder()
    app.dependency_overrides[get_geocoder] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_geocoder, None)


@pytest.fixture
def client(geocoder):
    return TestClient(app)


@pytest.fixture
def cipher():
    return get_cipher()


@pytest.fixture
def make_user(db_session):
    repo = SQLAlchemyUserRepository(db_session, User)
    counter = {"n": 0}

    def factory(role=Role.USER, email=None, name=None):
        counter["n"] += 1
        email = email or f"{role.value}{counter['n']}@example.com"
        return create_user(repo, name=name or f"{role.value.title()} {counter['n']}", email=email, password=PASSWORD, role=role)

    return factory


@pytest.fixture
def add_poi(db_session, cipher):
    repo = SQLAlchemyPOIRepository(db_session, POI)

    def factory(owner, name="Corner Cafe", lat=0.0, lon=0.0, category="cafe", **overrides):
        data = {
            "encrypted_name": cipher.encrypt(name),
            "encrypted_lat": cipher.encrypt(str(lat)),
            "encrypted_lon": cipher.encrypt(str(lon)),
            "name": name,
            "address": "1 Main Street",
            "area": "Indiranagar",
            "city": "Bengaluru",
            "postal_code": "560038",
            "category": category,
            "owner_id": owner.id,
        }
        data.update(overrides)
        return repo.create(data)

    return factory


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}
