"""API router package."""

from app.routers import elections, members, organization

__all__ = [
    "elections",
    "members",
    "organization",
]
