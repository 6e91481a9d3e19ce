from flask import Blueprint, request, current_app, abort
from flasgger import swag_from
from flask_jwt_extended import jwt_required, current_user

from .. import get_store
from ...models import Election
from ...ledger import (
    LedgerError,
    DuplicateVote,
    ElectionNotFound,
    cast_vote,
    check_eligibility,
)
from ...schemas.election import ElectionSummarySchema, CandidateBallotSchema
from ...schemas.vote import (
    VoteCastSchema,
    VoteReceiptSchema,
    VoteStatusSchema,
    VoteHistoryItemSchema,
    EligibilitySchema,
)
from ...utils.audit import safe_audit
from ...utils.clock import utcnow
from ...utils.rbac import current_role, ROLE_ADMIN
from ...utils.validation import validate_or_abort, parse_uuid_or_abort

voting_bp = Blueprint("voting", __name__)

vote_cast_schema = VoteCastSchema()
vote_receipt_schema = VoteReceiptSchema()
vote_status_schema = VoteStatusSchema()
vote_history_schema = VoteHistoryItemSchema(many=True)
eligibility_schema = EligibilitySchema()
election_summary_schema = ElectionSummarySchema()
election_summary_many_schema = ElectionSummarySchema(many=True)
ballot_candidates_schema = CandidateBallotSchema(many=True)

VOTING_STATUSES = (Election.VOTING_UPCOMING, Election.VOTING_ACTIVE, Election.VOTING_COMPLETED)


@voting_bp.get("/elections")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "List elections with their voting status",
    "description": "Draft elections are not listed. Each election is upcoming, active or completed.",
    "parameters": [
        {"in": "query", "name": "voting_status", "type": "string", "required": False,
         "enum": list(VOTING_STATUSES)},
    ],
    "responses": {200: {"description": "OK"}, 400: {"description": "Unknown voting_status"}, 401: {"description": "Unauthorized"}}
})
def list_elections():
    wanted = request.args.get("voting_status")
    if wanted is not None and wanted not in VOTING_STATUSES:
        abort(400, description={
            "code": "VALIDATION_ERROR",
            "message": "Validation error",
            "errors": {"voting_status": [f"Must be one of: {', '.join(VOTING_STATUSES)}."]},
        })

    now = utcnow()
    counts = {status: 0 for status in VOTING_STATUSES}
    items = []
    for election in get_store().list_elections():
        if election.status == Election.STATUS_DRAFT:
            continue
        voting_status = election.voting_status(now)
        counts[voting_status] += 1
        if wanted is None or voting_status == wanted:
            item = election_summary_schema.dump(election)
            item["voting_status"] = voting_status
            items.append(item)

    return {"elections": items, "count": len(items), **counts}, 200


@voting_bp.get("/elections/active")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "List elections currently open for voting",
    "responses": {200: {"description": "OK"}, 401: {"description": "Unauthorized"}}
})
def active_elections():
    elections = get_store().list_open_elections(utcnow())
    return {"elections": election_summary_many_schema.dump(elections), "count": len(elections)}, 200


@voting_bp.get("/elections/<election_id>/ballot")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "Ballot for an election: approved candidates and the caller's eligibility",
    "description": "The eligibility block is advisory; the vote endpoint re-checks everything.",
    "responses": {200: {"description": "Ballot"}, 400: {"description": "Malformed id"}, 404: {"description": "Election not found"}}
})
def ballot(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")
    store = get_store()

    election = store.get_election(election_id)
    if election is None:
        raise ElectionNotFound()

    now = utcnow()
    eligibility = check_eligibility(store, current_user.id, election_id, now=now)
    existing = store.find_vote(current_user.id, election_id)

    return {
        "election": election_summary_schema.dump(election),
        "progress_percentage": election.progress_percentage(now),
        "candidates": ballot_candidates_schema.dump(store.list_candidates(election_id, approved_only=True)),
        "has_voted": existing is not None,
        "eligibility": {"eligible": eligibility.eligible, "reason": eligibility.reason, "message": eligibility.message},
    }, 200


@voting_bp.get("/elections/<election_id>/eligibility")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "Advisory check of whether a vote would currently be accepted",
    "parameters": [
        {"in": "query", "name": "voter_id", "type": "string", "required": False,
         "description": "Admins only: check another voter"},
    ],
    "responses": {200: {"description": "Eligibility"}, 400: {"description": "Malformed id"}, 403: {"description": "Forbidden"}}
})
def eligibility(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")

    voter_id = current_user.id
    requested = request.args.get("voter_id")
    if requested:
        requested = parse_uuid_or_abort(requested, field="voter_id")
        if requested != current_user.id and current_role() != ROLE_ADMIN:
            abort(403, description={"code": "FORBIDDEN", "message": "Only admins can check other voters"})
        voter_id = requested

    result = check_eligibility(get_store(), voter_id, election_id)
    return eligibility_schema.dump({
        "election_id": election_id,
        "voter_id": voter_id,
        "eligible": result.eligible,
        "reason": result.reason,
        "message": result.message,
    }), 200


@voting_bp.get("/elections/<election_id>/has-voted")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "Whether the caller has a recorded vote in this election",
    "responses": {200: {"description": "OK"}, 404: {"description": "Election not found"}}
})
def has_voted(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")
    store = get_store()
    if store.get_election(election_id) is None:
        raise ElectionNotFound()

    vote = store.find_vote(current_user.id, election_id)
    return vote_status_schema.dump({"has_voted": vote is not None, "vote_id": vote.id if vote else None}), 200


@voting_bp.post("/cast")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "security": [{"BearerAuth": []}],
    "summary": "Cast a vote",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "election_id": {"type": "string", "example": "uuid"},
                "candidate_id": {"type": "string", "example": "uuid"},
            },
            "required": ["election_id", "candidate_id"],
        },
    }],
    "responses": {
        201: {"description": "Vote recorded"},
        400: {"description": "Validation error / candidate not eligible"},
        403: {"description": "Voting not open / voter not active"},
        404: {"description": "Election not found"},
        409: {"description": "Already voted"},
        500: {"description": "Storage error, safe to retry"},
    },
})
def cast():
    payload = validate_or_abort(vote_cast_schema, request.get_json(silent=True) or {})
    election_id = payload["election_id"]
    candidate_id = payload["candidate_id"]
    voter_id = current_user.id

    try:
        receipt = cast_vote(get_store(), voter_id, election_id, candidate_id)
    except DuplicateVote:
        current_app.logger.info("Duplicate vote attempt voter=%s election=%s", voter_id, election_id)
        safe_audit(
            action="VOTE_DUPLICATE_ATTEMPT",
            entity_type="ELECTION",
            entity_id=election_id,
            details={"voter_id": str(voter_id), "candidate_id": str(candidate_id)},
        )
        raise
    except LedgerError as e:
        safe_audit(
            action="VOTE_REJECTED",
            entity_type="ELECTION",
            entity_id=election_id,
            details={"voter_id": str(voter_id), "candidate_id": str(candidate_id), "reason": e.code},
        )
        raise

    safe_audit(
        action="VOTE_CAST",
        entity_type="VOTE",
        entity_id=receipt.vote_id,
        details={"election_id": str(election_id), "voter_id": str(voter_id)},
    )

    return vote_receipt_schema.dump({
        "message": "Vote recorded",
        "vote_id": receipt.vote_id,
        "election_id": receipt.election_id,
        "candidate_id": receipt.candidate_id,
        "cast_at": receipt.cast_at,
    }), 201


@voting_bp.get("/me")
@jwt_required()
@swag_from({
    "tags": ["Voting"],
    "summary": "The caller's voting history",
    "responses": {200: {"description": "OK"}, 401: {"description": "Unauthorized"}}
})
def my_votes():
    store = get_store()
    history = []
    for vote in store.votes_for_voter(current_user.id):
        election = store.get_election(vote.election_id)
        candidate = store.get_candidate(vote.candidate_id)
        history.append({
            "vote_id": vote.id,
            "cast_at": vote.cast_at,
            "election_id": vote.election_id,
            "election_title": election.title if election else None,
            "candidate_id": vote.candidate_id,
            "candidate_name": candidate.name if candidate else None,
        })

    return {"votes": vote_history_schema.dump(history), "count": len(history)}, 200
