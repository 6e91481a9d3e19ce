from .exceptions import (  # noqa: F401
    LedgerError,
    ElectionNotFound,
    ElectionNotActive,
    CandidateNotEligible,
    VoterNotActive,
    DuplicateVote,
)
from .store import EntityStore, SqlAlchemyStore, InMemoryStore  # noqa: F401
from .eligibility import Eligibility, check_eligibility  # noqa: F401
from .admission import VoteReceipt, cast_vote  # noqa: F401
from .tally import TallyEntry, get_tally  # noqa: F401
from .results import get_results  # noqa: F401
from .reconcile import check_consistency, reconcile_counters  # noqa: F401
