"""User-related schemas."""

from typing import Literal

from pydantic import BaseModel

UserRole = Literal["admin", "member"]


class Actor(BaseModel):
    """The authenticated caller every service operation acts on behalf of."""

    id: str
    organization_id: str
    role: UserRole = "member"
    status: str = "active"

    @property
    def is_admin(self) -> bool:
        """Return True for organization administrators."""
        return self.role == "admin"
