"""Date-driven election status scheduled job."""

from __future__ import annotations

import logging

from app.services.election_service import ElectionService
from app.utils.supabase_client import get_service_client

logger = logging.getLogger(__name__)


async def election_status_sync() -> None:
    """Open elections whose window has started and close those that have ended."""
    service = ElectionService(get_service_client())
    updated = service.sync_statuses()
    logger.info("election_status_sync completed, %s elections updated", updated)
