"""Background job modules for periodic election tasks."""

from app.jobs.status_sync import election_status_sync

__all__ = [
    "election_status_sync",
]
