"""FastAPI dependency injection helpers."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Header

from app.schemas.user import Actor
from app.services.common import SupabaseService
from app.utils.errors import ForbiddenError, UnauthorizedError
from app.utils.supabase_client import get_service_client, get_supabase_client
from supabase import Client


def get_db_client() -> Client:
    """Return the privileged Supabase client used by backend services."""
    return get_service_client()


def get_authenticated_user(authorization: str = Header(None)) -> Any:
    """Extract and validate a Supabase JWT from the Authorization header.

    Raises:
        UnauthorizedError: 401 if the header is missing, malformed, or
            the token cannot be validated.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing authorization header")

    token = authorization.split(" ", 1)[1]
    supabase = get_supabase_client()

    try:
        response = supabase.auth.get_user(token)
    except Exception as exc:
        raise UnauthorizedError("Invalid or expired token") from exc
    if not response or not response.user:
        raise UnauthorizedError("Invalid token")
    return response.user


def get_current_actor(
    user: Any = Depends(get_authenticated_user),
    client: Client = Depends(get_db_client),
) -> Actor:
    """Resolve the caller's organization and role from the users table."""
    db = SupabaseService(client)
    profile = db.find_one(
        "users",
        {"id": str(user.id)},
        columns="id,organization_id,role,status",
    )
    if profile is None or not profile.get("organization_id"):
        raise ForbiddenError("You are not a member of any organization")

    actor = Actor(
        id=str(profile["id"]),
        organization_id=str(profile["organization_id"]),
        role=profile.get("role") or "member",
        status=profile.get("status") or "pending",
    )
    if actor.role == "member" and actor.status != "active":
        raise ForbiddenError("Your account is pending approval by the organization admin")
    return actor
