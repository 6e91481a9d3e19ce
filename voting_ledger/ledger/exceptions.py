class LedgerError(Exception):
    """
    Base for every rejection the voting ledger can produce.
    Each subclass carries the error code and HTTP status the API renders.
    """

    code = "LEDGER_ERROR"
    status_code = 400
    default_message = "The vote could not be processed"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details or None
        super().__init__(self.message)


class ElectionNotFound(LedgerError):
    code = "ELECTION_NOT_FOUND"
    status_code = 404
    default_message = "Election not found"


class ElectionNotActive(LedgerError):
    code = "ELECTION_NOT_ACTIVE"
    status_code = 403
    default_message = "Voting is not currently open for this election"


class CandidateNotEligible(LedgerError):
    code = "CANDIDATE_NOT_ELIGIBLE"
    status_code = 400
    default_message = "Candidate not found or not approved for this election"


class VoterNotActive(LedgerError):
    code = "VOTER_NOT_ACTIVE"
    status_code = 403
    default_message = "Voter account is not active"


class DuplicateVote(LedgerError):
    # Expected outcome of a lost race; never retried
    code = "DUPLICATE_VOTE"
    status_code = 409
    default_message = "You have already voted in this election"
