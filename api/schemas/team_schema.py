"""
team_schema.py — Schemas for auth, team and leaderboard payloads.
"""
from marshmallow import EXCLUDE, Schema, fields, validate

from api.schemas.player_schema import PlayerResponseSchema


class RegisterSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True, validate=validate.Length(min=3, max=50))
    password = fields.String(required=True, load_only=True,
                             validate=validate.Length(min=6, max=128))


class LoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class UserSchema(Schema):
    user_id = fields.Integer()
    username = fields.String()
    is_admin = fields.Boolean()
    budget = fields.Integer()


class TokenResponseSchema(Schema):
    token = fields.String()
    user = fields.Nested(UserSchema)


class TeamPlayerRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    player_id = fields.Integer(required=True, strict=True,
                               validate=validate.Range(min=1, error="Invalid player ID"))


class TeamResponseSchema(Schema):
    team_id = fields.Integer()
    team_name = fields.String()
    total_points = fields.Float()
    players_count = fields.Integer()
    is_complete = fields.Boolean()
    budget = fields.Integer()
    players = fields.List(fields.Nested(PlayerResponseSchema))


class LeaderboardEntrySchema(Schema):
    rank = fields.Integer()
    user_id = fields.Integer()
    username = fields.String()
    team_id = fields.Integer()
    team_name = fields.String()
    total_points = fields.Float()
    players_count = fields.Integer()
    is_complete = fields.Boolean()
