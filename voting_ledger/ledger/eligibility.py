from dataclasses import dataclass
from datetime import datetime

from ..utils.clock import utcnow

REASON_ELECTION_NOT_FOUND = "ELECTION_NOT_FOUND"
REASON_ELECTION_NOT_PUBLISHED = "ELECTION_NOT_PUBLISHED"
REASON_OUTSIDE_VOTING_WINDOW = "OUTSIDE_VOTING_WINDOW"
REASON_VOTER_NOT_ACTIVE = "VOTER_NOT_ACTIVE"
REASON_ALREADY_VOTED = "ALREADY_VOTED"

_MESSAGES = {
    REASON_ELECTION_NOT_FOUND: "Election not found",
    REASON_ELECTION_NOT_PUBLISHED: "Voting is not currently open for this election",
    REASON_OUTSIDE_VOTING_WINDOW: "Voting is not currently open for this election",
    REASON_VOTER_NOT_ACTIVE: "Voter account is not active",
    REASON_ALREADY_VOTED: "You have already voted in this election",
}


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    reason: str | None = None

    @property
    def message(self) -> str | None:
        return _MESSAGES.get(self.reason)

    @classmethod
    def denied(cls, reason: str) -> "Eligibility":
        return cls(eligible=False, reason=reason)


def check_eligibility(store, voter_id, election_id, now: datetime | None = None) -> Eligibility:
    """
    Advisory pre-check of whether a vote by `voter_id` would be accepted now.

    Read-only. A positive answer is not a reservation: `cast_vote` repeats every
    check and the vote table's unique constraint has the final word.
    """
    now = now or utcnow()

    election = store.get_election(election_id)
    if election is None:
        return Eligibility.denied(REASON_ELECTION_NOT_FOUND)
    if election.status != election.STATUS_PUBLISHED:
        return Eligibility.denied(REASON_ELECTION_NOT_PUBLISHED)
    if not election.is_within_window(now):
        return Eligibility.denied(REASON_OUTSIDE_VOTING_WINDOW)

    voter = store.get_voter(voter_id)
    if voter is None or not voter.is_active:
        return Eligibility.denied(REASON_VOTER_NOT_ACTIVE)

    if store.find_vote(voter_id, election_id) is not None:
        return Eligibility.denied(REASON_ALREADY_VOTED)

    return Eligibility(eligible=True)
