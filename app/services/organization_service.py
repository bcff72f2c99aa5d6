"""Organization dashboard aggregation service."""

from __future__ import annotations

from typing import Any

from app.schemas.user import Actor
from app.services.common import SupabaseService
from app.services.election_service import ELECTION_STATUSES
from supabase import Client


class OrganizationService:
    """Organization lookup with member and election counts."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    def overview(self, actor: Actor) -> dict[str, Any]:
        """Return the actor's organization with dashboard counts."""
        organization = self.db.select_one(
            "organizations",
            {"id": actor.organization_id},
            not_found_label="Organization",
        )

        member_filters = {"organization_id": actor.organization_id, "role": "member"}
        active_members = self.db.count("users", {**member_filters, "status": "active"})
        pending_members = self.db.count("users", {**member_filters, "status": "pending"})

        by_status = {
            status: self.db.count(
                "elections", {"organization_id": actor.organization_id, "status": status}
            )
            for status in ELECTION_STATUSES
        }

        payload = dict(organization)
        payload["counts"] = {
            "active_members": active_members,
            "pending_members": pending_members,
            "total_members": active_members + pending_members,
            **{f"{status}_elections": total for status, total in by_status.items()},
            "total_elections": sum(by_status.values()),
        }
        return payload
