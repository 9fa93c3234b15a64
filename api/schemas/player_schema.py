"""
player_schema.py — Marshmallow schemas for player input and output.

PlayerResponseSchema is the only way a player leaves the API. It has no
points field, so internal scores cannot be serialized by accident.
"""
from marshmallow import EXCLUDE, Schema, fields, validate

from api.schemas.common import PaginationSchema
from scoring.valuation import MAX_STAT_VALUE

_stat_range = validate.Range(
    min=0, max=MAX_STAT_VALUE, error="Must be between {min} and {max}"
)
_required_text = validate.Regexp(r".*\S", error="Field cannot be blank")


class PlayerInputSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=_required_text)
    university = fields.String(required=True, validate=_required_text)
    category = fields.String(required=True, validate=_required_text)
    total_runs = fields.Integer(load_default=0, strict=True, validate=_stat_range)
    balls_faced = fields.Integer(load_default=0, strict=True, validate=_stat_range)
    innings_played = fields.Integer(load_default=0, strict=True, validate=_stat_range)
    wickets = fields.Integer(load_default=0, strict=True, validate=_stat_range)
    overs_bowled = fields.Float(load_default=0.0, allow_nan=False, validate=_stat_range)
    runs_conceded = fields.Integer(load_default=0, strict=True, validate=_stat_range)


class PlayerResponseSchema(Schema):
    player_id = fields.Integer()
    name = fields.String()
    university = fields.String()
    category = fields.String()
    total_runs = fields.Integer()
    balls_faced = fields.Integer()
    innings_played = fields.Integer()
    wickets = fields.Integer()
    overs_bowled = fields.Float()
    runs_conceded = fields.Integer()
    batting_strike_rate = fields.Float()
    batting_average = fields.Float()
    bowling_strike_rate = fields.Float(allow_none=True)
    economy_rate = fields.Float(allow_none=True)
    bowling_strike_rate_display = fields.String()
    economy_rate_display = fields.String()
    player_value = fields.Integer()


class RecommendedPlayerSchema(PlayerResponseSchema):
    recommendation_reason = fields.String()


class PlayerListResponseSchema(Schema):
    players = fields.List(fields.Nested(PlayerResponseSchema))
    budget = fields.Integer()


class PlayerPageSchema(PaginationSchema):
    players = fields.List(fields.Nested(PlayerResponseSchema))


class PlayerQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    page_size = fields.Integer(load_default=10, validate=validate.Range(min=1, max=100))
    search = fields.String(load_default="")
    category = fields.String(load_default="")


class ImportResultSchema(Schema):
    message = fields.String()
    added = fields.Integer()
    updated = fields.Integer()
    skipped = fields.Integer()
    failed = fields.Integer()


class AssistantReplySchema(Schema):
    reply = fields.String()
    recommended_players = fields.List(fields.Nested(RecommendedPlayerSchema))
    remaining_budget = fields.Integer()


player_response = PlayerResponseSchema()
