from marshmallow import Schema, fields


class CandidateBallotSchema(Schema):
    id = fields.UUID()
    name = fields.Str()
    description = fields.Str(allow_none=True)


class ElectionSummarySchema(Schema):
    id = fields.UUID()
    title = fields.Str()
    description = fields.Str(allow_none=True)
    status = fields.Str()
    start_date = fields.DateTime()
    end_date = fields.DateTime()
    total_votes = fields.Int()
