import uuid
from sqlalchemy.dialects.postgresql import JSONB
from ..extensions import db
from ..utils.clock import utcnow


class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)

    # Who performed the action (nullable for system jobs such as the CLI reconciler)
    actor_voter_id = db.Column(db.Uuid, nullable=True, index=True)
    actor_role = db.Column(db.String(30), nullable=True)

    action = db.Column(db.String(80), nullable=False, index=True)  # e.g. VOTE_CAST
    entity_type = db.Column(db.String(50), nullable=True, index=True)  # e.g. VOTE, ELECTION
    entity_id = db.Column(db.Uuid, nullable=True, index=True)

    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)

    details = db.Column(db.JSON().with_variant(JSONB, "postgresql"), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
