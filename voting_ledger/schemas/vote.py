from marshmallow import Schema, fields


class VoteCastSchema(Schema):
    election_id = fields.UUID(required=True)
    candidate_id = fields.UUID(required=True)


class VoteReceiptSchema(Schema):
    message = fields.Str(required=True)
    vote_id = fields.UUID()
    election_id = fields.UUID()
    candidate_id = fields.UUID()
    cast_at = fields.DateTime()


class VoteStatusSchema(Schema):
    has_voted = fields.Bool(required=True)
    vote_id = fields.UUID(allow_none=True)


class VoteHistoryItemSchema(Schema):
    vote_id = fields.UUID()
    cast_at = fields.DateTime()
    election_id = fields.UUID()
    election_title = fields.Str(allow_none=True)
    candidate_id = fields.UUID()
    candidate_name = fields.Str(allow_none=True)


class EligibilitySchema(Schema):
    election_id = fields.UUID()
    voter_id = fields.UUID()
    eligible = fields.Bool(required=True)
    reason = fields.Str(allow_none=True)
    message = fields.Str(allow_none=True)
