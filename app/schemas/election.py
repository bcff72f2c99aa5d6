"""Election schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ElectionStatus = Literal["upcoming", "ongoing", "completed"]


class ElectionCreate(BaseModel):
    """Request body for creating an election."""

    title: str = Field(..., min_length=1)
    description: str | None = None
    organization_id: str | None = None
    start_date: datetime
    end_date: datetime


class CandidateCreate(BaseModel):
    """Request body for adding a candidate to an election."""

    name: str = Field(..., min_length=1)
    position: str | None = None


class StatusUpdate(BaseModel):
    """Request body for changing an election's status."""

    status: ElectionStatus


class VoteCreate(BaseModel):
    """Request body for casting a vote."""

    candidate_id: str = Field(..., min_length=1)


class StoredRow(BaseModel):
    """Base for rows read back from Postgres, whose ids may be integers."""

    model_config = ConfigDict(coerce_numbers_to_str=True)


class ElectionResponse(StoredRow):
    """Election representation."""

    id: str
    title: str
    description: str | None = None
    organization_id: str
    start_date: datetime
    end_date: datetime
    status: ElectionStatus
    created_at: datetime | None = None


class CandidateResponse(StoredRow):
    """Candidate representation."""

    id: str
    name: str
    position: str | None = None
    election_id: str
    created_at: datetime | None = None


class CandidateWithVotes(CandidateResponse):
    """Candidate with its derived tally."""

    votes: int = 0
    percentage: int = 0


class ElectionWithCandidates(ElectionResponse):
    """Election with tallied candidates relative to the requesting user."""

    candidates: list[CandidateWithVotes] = Field(default_factory=list)
    user_voted: bool = False
    vote_count: int = 0


class ElectionResults(StoredRow):
    """Ranked results of one election."""

    election_id: str
    status: ElectionStatus
    total_votes: int
    candidates: list[CandidateWithVotes] = Field(default_factory=list)
    winner: CandidateWithVotes | None = None
    in_progress: bool = False


class ElectionEnvelope(BaseModel):
    """Single election response body."""

    election: ElectionResponse


class ElectionDetailEnvelope(BaseModel):
    """Single tallied election response body."""

    election: ElectionWithCandidates


class ElectionListEnvelope(BaseModel):
    """Tallied election list response body."""

    elections: list[ElectionWithCandidates]


class CandidateEnvelope(BaseModel):
    """Single candidate response body."""

    candidate: CandidateResponse


class ResultsEnvelope(BaseModel):
    """Election results response body."""

    results: ElectionResults


class VoteRecorded(BaseModel):
    """Acknowledgement returned after a vote is stored."""

    message: str = "Vote recorded successfully"
