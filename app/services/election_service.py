"""Election lifecycle, vote admission, and tallying logic."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.config import settings
from app.schemas.user import Actor
from app.services.common import SupabaseService, parse_row_id
from app.utils.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from app.utils.time import ensure_aware, now_utc, parse_timestamp
from supabase import Client

logger = logging.getLogger(__name__)

ELECTION_STATUSES = ("upcoming", "ongoing", "completed")
STATUS_ORDER = {status: index for index, status in enumerate(ELECTION_STATUSES)}


def initial_status(start_date: datetime, end_date: datetime, now: datetime) -> str:
    """Return the status a new election starts in.

    A window that has already ended is still reported as ``upcoming``;
    only a window containing ``now`` starts as ``ongoing``.
    """
    start, end, current = ensure_aware(start_date), ensure_aware(end_date), ensure_aware(now)
    if start <= current <= end:
        return "ongoing"
    return "upcoming"


def scheduled_status(election: dict[str, Any], now: datetime) -> str:
    """Return the status implied by an election's dates at ``now``."""
    start = parse_timestamp(election["start_date"])
    end = parse_timestamp(election["end_date"])
    current = ensure_aware(now)
    if current < start:
        return "upcoming"
    if current <= end:
        return "ongoing"
    return "completed"


def vote_percentage(votes: int, total: int) -> int:
    """Share of ``total`` as a whole percentage, rounding halves up."""
    if total <= 0:
        return 0
    return (votes * 200 + total) // (total * 2)


def rank_candidates(candidates: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Sort tallied candidates by votes, keeping listing order on ties."""
    return sorted(candidates, key=lambda candidate: -candidate["votes"])


def pick_winner(status: str, ranked: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Return the committed winner; only completed elections have one."""
    if status != "completed" or not ranked:
        return None
    return ranked[0]


def validate_status(status: str) -> str:
    """Reject anything outside the three election statuses."""
    if status not in STATUS_ORDER:
        raise InvalidInputError("Invalid status")
    return status


class ElectionService:
    """Election tally engine scoped to the acting user's organization."""

    def __init__(self, client: Client) -> None:
        self.db = SupabaseService(client)

    @staticmethod
    def _ensure_admin(actor: Actor, reason: str) -> None:
        if not actor.is_admin:
            raise ForbiddenError(reason)

    def _scoped_election(self, actor: Actor, election_id: str) -> dict[str, Any]:
        row_id = parse_row_id(election_id)
        if row_id is None:
            raise NotFoundError("Election")
        election = self.db.select_one(
            "elections",
            {"id": row_id},
            not_found_label="Election",
        )
        self.db.ensure_same_organization(election, actor.organization_id)
        return election

    def _tally(self, election_id: str) -> list[dict[str, Any]]:
        """Return candidates in listing order with vote counts and shares."""
        candidates = self.db.select_many(
            "candidates",
            filters={"election_id": election_id},
            order_by="created_at",
        )
        tallied = []
        for candidate in candidates:
            payload = dict(candidate)
            # Exact head-only count; row selects are capped by PostgREST max-rows.
            payload["votes"] = self.db.count("votes", {"candidate_id": candidate["id"]})
            tallied.append(payload)

        total = sum(candidate["votes"] for candidate in tallied)
        for candidate in tallied:
            candidate["percentage"] = vote_percentage(candidate["votes"], total)
        return tallied

    def _has_voted(self, user_id: str, election_id: str) -> bool:
        existing = self.db.find_one(
            "votes",
            {"user_id": user_id, "election_id": election_id},
            columns="id",
        )
        return existing is not None

    def _hydrate(self, actor: Actor, election: dict[str, Any]) -> dict[str, Any]:
        election_id = str(election["id"])
        payload = dict(election)
        payload["candidates"] = self._tally(election_id)
        payload["user_voted"] = self._has_voted(actor.id, election_id)
        payload["vote_count"] = sum(candidate["votes"] for candidate in payload["candidates"])
        return payload

    def create_election(
        self,
        actor: Actor,
        title: str,
        start_date: datetime,
        end_date: datetime,
        description: str | None = None,
        organization_id: str | None = None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Create an election whose status is derived from its dates (admin only)."""
        self._ensure_admin(actor, "Only admins can create elections")

        target_org = organization_id or actor.organization_id
        if str(target_org) != str(actor.organization_id):
            raise ForbiddenError("You can only create elections for your organization")

        if ensure_aware(start_date) > ensure_aware(end_date):
            raise InvalidInputError("End date must be after start date")

        status = initial_status(start_date, end_date, now or now_utc())
        election = self.db.insert_one(
            "elections",
            {
                "title": title,
                "description": description,
                "organization_id": target_org,
                "start_date": ensure_aware(start_date).isoformat(),
                "end_date": ensure_aware(end_date).isoformat(),
                "status": status,
            },
        )
        logger.info(
            "Election %s created for organization %s as %s",
            election["id"],
            target_org,
            status,
        )
        return election

    def add_candidate(
        self,
        actor: Actor,
        election_id: str,
        name: str,
        position: str | None = None,
    ) -> dict[str, Any]:
        """Add a candidate to an election (admin only)."""
        self._ensure_admin(actor, "Only admins can add candidates")
        election = self._scoped_election(actor, election_id)
        return self.db.insert_one(
            "candidates",
            {"name": name, "position": position, "election_id": election["id"]},
        )

    def set_status(self, actor: Actor, election_id: str, status: str) -> dict[str, Any]:
        """Move an election to ``status`` (admin only).

        Any transition is accepted unless strict transitions are enabled, in
        which case moving backwards raises InvalidStateError.
        """
        self._ensure_admin(actor, "Only admins can change election status")
        validate_status(status)
        election = self._scoped_election(actor, election_id)

        current = str(election.get("status") or "upcoming")
        if settings.strict_status_transitions and STATUS_ORDER[status] < STATUS_ORDER.get(
            current, 0
        ):
            raise InvalidStateError(
                f"Cannot move election from {current} to {status}",
                code="INVALID_TRANSITION",
            )
        if status == current:
            return election

        rows = self.db.update("elections", {"id": election["id"]}, {"status": status})
        if not rows:
            raise InvalidInputError("Failed to update election status")
        logger.info("Election %s status %s -> %s", election["id"], current, status)
        return rows[0]

    def cast_vote(self, actor: Actor, election_id: str, candidate_id: str) -> dict[str, Any]:
        """Record the actor's single vote in an ongoing election."""
        election = self._scoped_election(actor, election_id)
        if election.get("status") != "ongoing":
            raise InvalidStateError(
                "This election is not currently active",
                code="ELECTION_NOT_ACTIVE",
            )

        already_voted = ConflictError(
            "You have already voted in this election",
            code="ALREADY_VOTED",
        )
        if self._has_voted(actor.id, str(election["id"])):
            raise already_voted

        candidate_row_id = parse_row_id(candidate_id)
        candidate = (
            self.db.find_one("candidates", {"id": candidate_row_id})
            if candidate_row_id is not None
            else None
        )
        if candidate is None or str(candidate["election_id"]) != str(election["id"]):
            raise InvalidInputError("Invalid candidate")

        # votes_user_election_key rejects a concurrent duplicate that passed the check above.
        vote = self.db.insert_one(
            "votes",
            {
                "user_id": actor.id,
                "election_id": election["id"],
                "candidate_id": candidate["id"],
            },
            conflict=already_voted,
        )
        logger.info("Vote recorded in election %s", election["id"])
        return vote

    def get_election(self, actor: Actor, election_id: str) -> dict[str, Any]:
        """Return one election with tallied candidates."""
        return self._hydrate(actor, self._scoped_election(actor, election_id))

    def list_elections(self, actor: Actor, status: str | None = None) -> list[dict[str, Any]]:
        """Return the organization's elections, optionally filtered by status."""
        filters: dict[str, Any] = {"organization_id": actor.organization_id}
        if status is not None:
            filters["status"] = validate_status(status)
        elections = self.db.select_many("elections", filters=filters, order_by="start_date")
        return [self._hydrate(actor, election) for election in elections]

    def list_elections_by_status(self, actor: Actor, status: str) -> list[dict[str, Any]]:
        """Return the organization's elections in ``status``."""
        return self.list_elections(actor, status=status)

    def get_results(self, actor: Actor, election_id: str) -> dict[str, Any]:
        """Return ranked candidates, totals, and the winner when completed."""
        election = self._scoped_election(actor, election_id)
        status = str(election.get("status") or "upcoming")
        ranked = rank_candidates(self._tally(str(election["id"])))
        return {
            "election_id": str(election["id"]),
            "status": status,
            "total_votes": sum(candidate["votes"] for candidate in ranked),
            "candidates": ranked,
            "winner": pick_winner(status, ranked),
            "in_progress": status == "ongoing",
        }

    def sync_statuses(self, now: datetime | None = None) -> int:
        """Apply date-driven transitions across all organizations.

        Only moves elections forward; returns how many were updated.
        """
        current = now or now_utc()
        updated = 0
        for status in ("upcoming", "ongoing"):
            for election in self.db.select_many("elections", filters={"status": status}):
                target = scheduled_status(election, current)
                if STATUS_ORDER[target] <= STATUS_ORDER[status]:
                    continue
                self.db.update("elections", {"id": election["id"]}, {"status": target})
                logger.info(
                    "Election %s status %s -> %s by schedule", election["id"], status, target
                )
                updated += 1
        return updated
