import uuid
from ..extensions import db
from ..utils.clock import utcnow


class Voter(db.Model):
    __tablename__ = "voters"

    STANDING_ACTIVE = "active"
    STANDING_SUSPENDED = "suspended"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    name = db.Column(db.String(200), nullable=True)

    # Managed by the admin service
    standing = db.Column(db.String(20), nullable=False, default=STANDING_ACTIVE)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    votes = db.relationship("Vote", backref="voter", lazy=True, order_by="Vote.cast_at")

    @property
    def is_active(self) -> bool:
        return self.standing == self.STANDING_ACTIVE

    @property
    def voted_election_ids(self) -> list:
        # Derived from the votes table, which stays authoritative
        return [v.election_id for v in self.votes]
