import uuid
from ..extensions import db
from ..utils.clock import utcnow


class Vote(db.Model):
    __tablename__ = "votes"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)

    voter_id = db.Column(db.Uuid, db.ForeignKey("voters.id"), nullable=False, index=True)
    election_id = db.Column(db.Uuid, db.ForeignKey("elections.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = db.Column(db.Uuid, db.ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)

    cast_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        # One vote per voter per election
        db.UniqueConstraint("voter_id", "election_id", name="uq_votes_voter_election"),
        db.Index("ix_votes_election_candidate", "election_id", "candidate_id"),
    )
