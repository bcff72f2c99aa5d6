"""Organization member schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MemberResponse(BaseModel):
    """A member row as shown to organization admins."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str
    email: str
    role: str = "member"
    organization_id: str | None = None
    member_id: str | None = None
    status: str
    created_at: datetime | None = None


class MemberListEnvelope(BaseModel):
    members: list[MemberResponse]


class MemberEnvelope(BaseModel):
    member: MemberResponse
