"""Pydantic schemas for the admin dashboard."""

from pydantic import BaseModel


class AdminStats(BaseModel):
    total_users: int
    total_owners: int
    total_pois: int
    recent_activity: int
