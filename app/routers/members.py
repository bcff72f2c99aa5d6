"""Organization member management endpoints (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.dependencies import get_current_actor, get_db_client
from app.schemas.member import MemberEnvelope, MemberListEnvelope
from app.schemas.user import Actor
from app.services.member_service import MemberService
from supabase import Client

router = APIRouter()


@router.get("", response_model=MemberListEnvelope)
def list_members(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List every member of the caller's organization."""
    service = MemberService(client)
    return {"members": service.list_members(actor)}


@router.get("/status/{member_status}", response_model=MemberListEnvelope)
def list_members_by_status(
    member_status: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List active or pending members."""
    service = MemberService(client)
    return {"members": service.list_members(actor, status=member_status)}


@router.post("/{member_id}/approve", response_model=MemberEnvelope)
def approve_member(
    member_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    service = MemberService(client)
    return {"member": service.approve(actor, member_id)}


@router.post("/{member_id}/reject", response_model=MemberEnvelope)
def reject_member(
    member_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    service = MemberService(client)
    return {"member": service.reject(actor, member_id)}
