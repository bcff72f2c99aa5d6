"""Organization member directory and approval service."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from app.schemas.user import Actor
from app.services.common import SupabaseService
from app.utils.errors import ForbiddenError, InvalidInputError, NotFoundError
from supabase import Client

logger = logging.getLogger(__name__)

MEMBER_COLUMNS = "id,name,email,role,organization_id,member_id,status,created_at"
LISTABLE_STATUSES = ("active", "pending")


class MemberService:
    """Admin-only listing, approval and rejection of organization members."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    @staticmethod
    def _ensure_admin(actor: Actor) -> None:
        if not actor.is_admin:
            raise ForbiddenError("Only admins can manage members")

    def list_members(self, actor: Actor, status: str | None = None) -> list[dict[str, Any]]:
        """Return the organization's members, optionally limited to one status."""
        self._ensure_admin(actor)
        filters = {"organization_id": actor.organization_id, "role": "member"}
        if status is not None:
            if status not in LISTABLE_STATUSES:
                raise InvalidInputError("Invalid status parameter")
            filters["status"] = status
        return self.db.select_many(
            "users",
            filters=filters,
            columns=MEMBER_COLUMNS,
            order_by="created_at",
        )

    def approve(self, actor: Actor, member_id: str) -> dict[str, Any]:
        """Activate a pending member so they can sign in and vote."""
        return self._set_member_status(actor, member_id, "active", verb="approve")

    def reject(self, actor: Actor, member_id: str) -> dict[str, Any]:
        """Mark a member as rejected."""
        return self._set_member_status(actor, member_id, "rejected", verb="reject")

    def _set_member_status(
        self, actor: Actor, member_id: str, status: str, verb: str
    ) -> dict[str, Any]:
        self._ensure_admin(actor)
        try:
            user_id = str(uuid.UUID(str(member_id)))
        except ValueError as exc:
            raise NotFoundError("Member") from exc

        member = self.db.select_one(
            "users", {"id": user_id}, columns=MEMBER_COLUMNS, not_found_label="Member"
        )
        self.db.ensure_same_organization(
            member,
            actor.organization_id,
            reason=f"Cannot {verb} members from other organizations",
        )

        rows = self.db.update("users", {"id": user_id}, {"status": status})
        if not rows:
            raise InvalidInputError(f"Failed to {verb} member")
        logger.info("Member %s status %s -> %s", user_id, member.get("status"), status)
        updated = rows[0]
        return {key: updated.get(key) for key in MEMBER_COLUMNS.split(",")}
