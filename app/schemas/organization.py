"""Organization schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class OrganizationCounts(BaseModel):
    """Member and election counts shown on the admin dashboard."""

    active_members: int
    pending_members: int
    total_members: int
    ongoing_elections: int
    upcoming_elections: int
    completed_elections: int
    total_elections: int


class OrganizationOverview(BaseModel):
    """Organization record with dashboard counts."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    admin_id: str | None = None
    created_at: datetime | None = None
    counts: OrganizationCounts
