# Import ALL models so SQLAlchemy registers them
from .election import Election  # noqa: F401
from .candidate import Candidate  # noqa: F401
from .voter import Voter  # noqa: F401
from .vote import Vote  # noqa: F401
from .audit_log import AuditLog  # noqa: F401

__all__ = [
    "Election",
    "Candidate",
    "Voter",
    "Vote",
    "AuditLog",
]
