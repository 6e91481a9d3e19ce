import uuid
from datetime import datetime

from ..extensions import db
from ..utils.clock import utcnow


class Election(db.Model):
    __tablename__ = "elections"

    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"
    STATUS_ENDED = "ended"
    STATUS_ARCHIVED = "archived"
    # Lifecycle order; an election only ever moves forward through it
    LIFECYCLE = (STATUS_DRAFT, STATUS_PUBLISHED, STATUS_ENDED, STATUS_ARCHIVED)

    VOTING_UPCOMING = "upcoming"
    VOTING_ACTIVE = "active"
    VOTING_COMPLETED = "completed"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)

    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)

    status = db.Column(db.String(20), nullable=False, default=STATUS_DRAFT, index=True)

    # Cache of count(votes); only the admission controller and reconciler write it
    total_votes = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    candidates = db.relationship(
        "Candidate",
        backref="election",
        lazy=True,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        db.CheckConstraint("start_date < end_date", name="ck_elections_window"),
    )

    def advance_status(self, new_status: str) -> None:
        if new_status not in self.LIFECYCLE:
            raise ValueError(f"Unknown election status: {new_status}")
        if self.LIFECYCLE.index(new_status) <= self.LIFECYCLE.index(self.status):
            raise ValueError(f"Election status cannot move from {self.status} to {new_status}")
        self.status = new_status

    def is_within_window(self, now: datetime) -> bool:
        return self.start_date <= now <= self.end_date

    def is_voting_open(self, now: datetime) -> bool:
        return self.status == self.STATUS_PUBLISHED and self.is_within_window(now)

    def progress_percentage(self, now: datetime) -> int:
        """How far through the voting window `now` is, clamped to 0..100."""
        total = (self.end_date - self.start_date).total_seconds()
        elapsed = (now - self.start_date).total_seconds()
        if elapsed <= 0:
            return 0
        if elapsed >= total:
            return 100
        return round(elapsed / total * 100)

    def voting_status(self, now: datetime) -> str:
        """Where the election sits relative to voting: upcoming, active or completed."""
        if self.status in (self.STATUS_ENDED, self.STATUS_ARCHIVED) or now > self.end_date:
            return self.VOTING_COMPLETED
        if self.is_voting_open(now):
            return self.VOTING_ACTIVE
        return self.VOTING_UPCOMING
