"""Organization endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.organization import OrganizationOverview
from app.schemas.user import Actor
from app.services.organization_service import OrganizationService
from supabase import Client

router = APIRouter()


@router.get("", response_model=OrganizationOverview)
def get_organization(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return the caller's organization with member and election counts."""
    service = OrganizationService(client)
    return service.overview(actor)
