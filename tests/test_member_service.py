"""Member listing, approval and rejection tests."""

from __future__ import annotations

import uuid

import pytest

from app.schemas.user import Actor
from app.services.member_service import MemberService
from app.utils.errors import ForbiddenError, InvalidInputError, NotFoundError
from tests.fakes import FakeSupabase


def _user(fake_db: FakeSupabase, organization_id: str = "ORG1", **fields) -> dict:
    row = {
        "id": str(uuid.uuid4()),
        "name": "Grace",
        "email": f"{uuid.uuid4().hex[:8]}@example.com",
        "role": "member",
        "organization_id": organization_id,
        "status": "pending",
        **fields,
    }
    return fake_db.seed("users", **row)


@pytest.fixture
def members(fake_db: FakeSupabase) -> MemberService:
    return MemberService(fake_db)  # type: ignore[arg-type]


def test_list_members_is_scoped_to_organization(
    members: MemberService, fake_db: FakeSupabase, admin: Actor
) -> None:
    """Only members of the admin's organization are listed, admins excluded."""
    active = _user(fake_db, status="active")
    pending = _user(fake_db)
    _user(fake_db, role="admin", status="active")
    _user(fake_db, organization_id="ORG2", status="active")

    listed = members.list_members(admin)
    assert {row["id"] for row in listed} == {active["id"], pending["id"]}

    assert [row["id"] for row in members.list_members(admin, status="pending")] == [pending["id"]]
    assert [row["id"] for row in members.list_members(admin, status="active")] == [active["id"]]


def test_list_members_rejects_unknown_status(members: MemberService, admin: Actor) -> None:
    with pytest.raises(InvalidInputError):
        members.list_members(admin, status="rejected")


def test_member_management_requires_admin(
    members: MemberService, fake_db: FakeSupabase, member: Actor
) -> None:
    """Members cannot list, approve or reject anyone."""
    pending = _user(fake_db)
    with pytest.raises(ForbiddenError):
        members.list_members(member)
    with pytest.raises(ForbiddenError):
        members.list_members(member, status="bogus")
    with pytest.raises(ForbiddenError):
        members.approve(member, pending["id"])
    with pytest.raises(ForbiddenError):
        members.reject(member, pending["id"])
    assert fake_db.rows("users", id=pending["id"])[0]["status"] == "pending"


def test_approve_and_reject_update_status(
    members: MemberService, fake_db: FakeSupabase, admin: Actor
) -> None:
    first = _user(fake_db)
    second = _user(fake_db)

    approved = members.approve(admin, first["id"])
    rejected = members.reject(admin, second["id"])

    assert approved["status"] == "active"
    assert rejected["status"] == "rejected"
    assert fake_db.rows("users", id=first["id"])[0]["status"] == "active"
    assert fake_db.rows("users", id=second["id"])[0]["status"] == "rejected"


def test_approve_member_of_other_organization_is_forbidden(
    members: MemberService, fake_db: FakeSupabase, admin: Actor
) -> None:
    foreign = _user(fake_db, organization_id="ORG2")

    with pytest.raises(ForbiddenError) as approve_error:
        members.approve(admin, foreign["id"])
    with pytest.raises(ForbiddenError) as reject_error:
        members.reject(admin, foreign["id"])

    assert approve_error.value.message == "Cannot approve members from other organizations"
    assert reject_error.value.message == "Cannot reject members from other organizations"
    assert fake_db.rows("users", id=foreign["id"])[0]["status"] == "pending"


@pytest.mark.parametrize("member_id", ["not-a-uuid", "42", str(uuid.uuid4())])
def test_approve_unknown_member_is_not_found(
    members: MemberService, admin: Actor, member_id: str
) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        members.approve(admin, member_id)
    assert excinfo.value.message == "Member not found"
