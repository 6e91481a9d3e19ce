from marshmallow import Schema, fields


class TallyEntrySchema(Schema):
    candidate_id = fields.UUID(required=True)
    name = fields.Str(required=True)
    vote_count = fields.Int(required=True)
    rank = fields.Int(required=True)


class CandidateResultSchema(Schema):
    id = fields.UUID(required=True)
    name = fields.Str(required=True)
    vote_count = fields.Int(required=True)
    percentage = fields.Float(required=True)
    rank = fields.Int(required=True)


class TurnoutSchema(Schema):
    votes = fields.Int(required=True)
    eligible_voters = fields.Int(required=True)
    percentage = fields.Float(required=True)


class ElectionResultsSchema(Schema):
    election_id = fields.UUID(required=True)
    title = fields.Str(required=True)
    status = fields.Str(required=True)
    total_votes = fields.Int(required=True)
    candidates = fields.List(fields.Nested(CandidateResultSchema), required=True)
    winner_id = fields.UUID(allow_none=True)
    is_tie = fields.Bool(required=True)
    turnout = fields.Nested(TurnoutSchema, required=True)


class CounterDriftSchema(Schema):
    cached = fields.Int()
    actual = fields.Int()


class CandidateDriftSchema(CounterDriftSchema):
    candidate_id = fields.UUID()


class ConsistencyReportSchema(Schema):
    election_id = fields.UUID()
    consistent = fields.Bool()
    total_votes = fields.Nested(CounterDriftSchema, allow_none=True)
    candidates = fields.List(fields.Nested(CandidateDriftSchema))


class ReconcileReportSchema(Schema):
    election_id = fields.UUID()
    total_votes = fields.Nested(CounterDriftSchema, allow_none=True)
    candidates = fields.List(fields.Nested(CandidateDriftSchema))
