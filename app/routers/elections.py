"""Election endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.dependencies import get_current_actor, get_db_client
from app.schemas.election import (
    CandidateCreate,
    CandidateEnvelope,
    ElectionCreate,
    ElectionDetailEnvelope,
    ElectionEnvelope,
    ElectionListEnvelope,
    ResultsEnvelope,
    StatusUpdate,
    VoteCreate,
    VoteRecorded,
)
from app.schemas.user import Actor
from app.services.election_service import ElectionService
from supabase import Client

router = APIRouter()


@router.get("", response_model=ElectionListEnvelope)
def list_elections(
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List every election in the caller's organization."""
    service = ElectionService(client)
    return {"elections": service.list_elections(actor)}


@router.get("/status/{election_status}", response_model=ElectionListEnvelope)
def list_elections_by_status(
    election_status: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """List the organization's elections in one status."""
    service = ElectionService(client)
    return {"elections": service.list_elections_by_status(actor, election_status)}


@router.get("/{election_id}", response_model=ElectionDetailEnvelope)
def get_election(
    election_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return one election with tallied candidates."""
    service = ElectionService(client)
    return {"election": service.get_election(actor, election_id)}


@router.get("/{election_id}/results", response_model=ResultsEnvelope)
def get_results(
    election_id: str,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Return ranked results and the winner of a completed election."""
    service = ElectionService(client)
    return {"results": service.get_results(actor, election_id)}


@router.post("", response_model=ElectionEnvelope, status_code=status.HTTP_201_CREATED)
def create_election(
    payload: ElectionCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Create a new election."""
    service = ElectionService(client)
    election = service.create_election(
        actor,
        title=payload.title,
        description=payload.description,
        organization_id=payload.organization_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return {"election": election}


@router.post(
    "/{election_id}/candidates",
    response_model=CandidateEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def add_candidate(
    election_id: str,
    payload: CandidateCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Add a candidate to an election."""
    service = ElectionService(client)
    candidate = service.add_candidate(
        actor,
        election_id=election_id,
        name=payload.name,
        position=payload.position,
    )
    return {"candidate": candidate}


@router.put("/{election_id}/status", response_model=ElectionEnvelope)
def set_election_status(
    election_id: str,
    payload: StatusUpdate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Change an election's status."""
    service = ElectionService(client)
    return {"election": service.set_status(actor, election_id, payload.status)}


@router.post(
    "/{election_id}/vote",
    response_model=VoteRecorded,
    status_code=status.HTTP_201_CREATED,
)
def cast_vote(
    election_id: str,
    payload: VoteCreate,
    actor: Actor = Depends(get_current_actor),
    client: Client = Depends(get_db_client),
) -> dict:
    """Cast the caller's vote."""
    service = ElectionService(client)
    service.cast_vote(actor, election_id=election_id, candidate_id=payload.candidate_id)
    return {"message": "Vote recorded successfully"}
