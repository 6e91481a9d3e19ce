from flask import Blueprint, request, current_app
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from .. import get_store
from ...ledger import get_tally, get_results
from ...schemas.results import TallyEntrySchema, ElectionResultsSchema
from ...utils.validation import parse_uuid_or_abort, parse_bool_arg

results_bp = Blueprint("results", __name__)

tally_schema = TallyEntrySchema(many=True)
election_results_schema = ElectionResultsSchema()

_CONSISTENT_PARAM = {
    "in": "query", "name": "consistent", "type": "boolean", "required": False,
    "description": "Aggregate from the votes table instead of reading cached counters",
}


@results_bp.get("/elections/<election_id>/tally")
@jwt_required()
@swag_from({
    "tags": ["Results"],
    "summary": "Per-candidate vote counts (approved candidates only)",
    "description": "Sorted by votes descending. Candidates with equal counts share a rank.",
    "parameters": [_CONSISTENT_PARAM],
    "responses": {200: {"description": "Tally"}, 400: {"description": "Malformed id"}, 404: {"description": "Election not found"}}
})
def tally(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")
    consistent = parse_bool_arg(request.args.get("consistent"))

    entries = get_tally(get_store(), election_id, consistent=consistent)
    return {"election_id": str(election_id), "consistent": consistent, "tally": tally_schema.dump(entries)}, 200


@results_bp.get("/elections/<election_id>/results")
@jwt_required()
@swag_from({
    "tags": ["Results"],
    "summary": "Ranked results with percentages, winner and turnout",
    "description": (
        "Available at any election status.\n"
        "- percentage is 0 for every candidate while there are no votes.\n"
        "- winner_id is null on a tie for first place (is_tie=true) or when nobody has votes."
    ),
    "parameters": [_CONSISTENT_PARAM],
    "responses": {200: {"description": "Results"}, 400: {"description": "Malformed id"}, 404: {"description": "Election not found"}}
})
def results(election_id):
    election_id = parse_uuid_or_abort(election_id, field="election_id")
    consistent = parse_bool_arg(request.args.get("consistent"))

    projection = get_results(
        get_store(),
        election_id,
        consistent=consistent,
        precision=current_app.config.get("RESULTS_PRECISION", 2),
    )
    return election_results_schema.dump(projection), 200
