import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from ..utils.clock import utcnow
from .exceptions import (
    ElectionNotFound,
    ElectionNotActive,
    CandidateNotEligible,
    VoterNotActive,
    DuplicateVote,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteReceipt:
    vote_id: uuid.UUID
    election_id: uuid.UUID
    candidate_id: uuid.UUID
    cast_at: datetime


def cast_vote(store, voter_id, election_id, candidate_id, now: datetime | None = None) -> VoteReceipt:
    """
    Admit a single vote.

    Every precondition is re-read here rather than trusted from an earlier
    eligibility check. The vote row and both counter increments are committed
    together; on any failure the store is rolled back and nothing is recorded.

    Raises ElectionNotFound, ElectionNotActive, CandidateNotEligible,
    VoterNotActive or DuplicateVote. None of them are retried here.
    """
    now = now or utcnow()

    election = store.get_election(election_id)
    if election is None:
        raise ElectionNotFound()
    if not election.is_voting_open(now):
        raise ElectionNotActive(details={"status": election.status})

    candidate = store.get_candidate(candidate_id)
    if candidate is None or candidate.election_id != election.id or not candidate.is_approved:
        raise CandidateNotEligible()

    voter = store.get_voter(voter_id)
    if voter is None or not voter.is_active:
        raise VoterNotActive()

    # Fast path for the common repeat-submit case; the insert below is authoritative
    if store.find_vote(voter_id, election_id) is not None:
        raise DuplicateVote()

    try:
        vote = store.insert_vote(voter_id, election_id, candidate_id, cast_at=now)
        store.increment_counters(election_id, candidate_id)
        store.commit()
    except DuplicateVote:
        store.rollback()
        logger.info("Duplicate vote rejected by store voter=%s election=%s", voter_id, election_id)
        raise
    except Exception:
        store.rollback()
        raise

    logger.info("Vote admitted vote=%s election=%s candidate=%s", vote.id, election_id, candidate_id)
    return VoteReceipt(
        vote_id=vote.id,
        election_id=election_id,
        candidate_id=candidate_id,
        cast_at=vote.cast_at,
    )
