from datetime import timedelta
from flask import Blueprint
from flasgger import swag_from
from sqlalchemy import func
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import get_store
from ...extensions import db
from ...ledger import check_consistency, reconcile_counters
from ...models.election import Election
from ...models.vote import Vote
from ...models.voter import Voter
from ...schemas.results import ConsistencyReportSchema, ReconcileReportSchema
from ...utils.audit import audit_log, safe_audit
from ...utils.clock import utcnow
from ...utils.rbac import roles_required, ROLE_ADMIN
from ...utils.validation import parse_uuid_or_abort

admin_bp = Blueprint("admin", __name__)

consistency_schema = ConsistencyReportSchema()
reconcile_many_schema = ReconcileReportSchema(many=True)


@admin_bp.get("/metrics")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Admin"],
    "summary": "Ledger usage metrics (admin only)",
    "responses": {200: {"description": "Metrics"}, 403: {"description": "Forbidden"}}
})
def metrics():
    now = utcnow()
    since_24h = now - timedelta(hours=24)

    voters_by_standing = dict(
        db.session.query(Voter.standing, func.count(Voter.id)).group_by(Voter.standing).all()
    )
    elections_by_status = dict(
        db.session.query(Election.status, func.count(Election.id)).group_by(Election.status).all()
    )
    total_votes = db.session.query(func.count(Vote.id)).scalar() or 0
    votes_last_24h = db.session.query(func.count(Vote.id)).filter(Vote.cast_at >= since_24h).scalar() or 0

    safe_audit(
        action="ADMIN_METRICS_VIEWED",
        entity_type="ADMIN",
        details={"user_id": str(get_jwt_identity())},
    )

    return {
        "timestamp": now.isoformat() + "Z",
        "voters": {
            "total": sum(voters_by_standing.values()),
            "active": voters_by_standing.get(Voter.STANDING_ACTIVE, 0),
            "suspended": voters_by_standing.get(Voter.STANDING_SUSPENDED, 0),
        },
        "elections": {
            "total": sum(elections_by_status.values()),
            **{status: elections_by_status.get(status, 0) for status in Election.LIFECYCLE},
        },
        "votes": {"total": total_votes, "cast_last_24h": votes_last_24h},
    }, 200


@admin_bp.get("/elections/<election_id>/consistency")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Admin"],
    "summary": "Compare cached vote counters with the votes table",
    "responses": {200: {"description": "Report"}, 403: {"description": "Forbidden"}, 404: {"description": "Election not found"}}
})
def consistency(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")
    report = check_consistency(get_store(), election_id)
    return consistency_schema.dump(report), 200


@admin_bp.post("/elections/<election_id>/reconcile")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Admin"],
    "summary": "Rebuild cached vote counters for an election from the votes table",
    "responses": {200: {"description": "Corrections applied"}, 403: {"description": "Forbidden"}, 404: {"description": "Election not found"}}
})
def reconcile(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")
    corrections = reconcile_counters(get_store(), election_id=election_id)

    audit_log(
        action="TALLY_RECONCILED",
        entity_type="ELECTION",
        entity_id=election_id,
        details={"source": "api", "corrected": bool(corrections)},
    )
    db.session.commit()

    return {
        "election_id": str(election_id),
        "corrected": bool(corrections),
        "corrections": reconcile_many_schema.dump(corrections),
    }, 200
