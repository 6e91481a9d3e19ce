import uuid
from ..extensions import db
from ..utils.clock import utcnow


class Candidate(db.Model):
    __tablename__ = "candidates"

    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    VALID_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    election_id = db.Column(db.Uuid, db.ForeignKey("elections.id", ondelete="CASCADE"), nullable=False, index=True)

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)

    # Cache of count(votes for this candidate)
    vote_count = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        db.Index("ix_candidates_election_status", "election_id", "status"),
    )

    @property
    def is_approved(self) -> bool:
        return self.status == self.STATUS_APPROVED
