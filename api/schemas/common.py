"""
common.py — Shared response schemas.
"""
from marshmallow import Schema, fields


class ErrorSchema(Schema):
    error = fields.String()
    message = fields.String()
    errors = fields.Raw()


class PaginationSchema(Schema):
    page = fields.Integer()
    per_page = fields.Integer()
    total = fields.Integer()
    pages = fields.Integer()


class MessageSchema(Schema):
    message = fields.String()


class BudgetMessageSchema(MessageSchema):
    budget = fields.Integer()
    remaining_budget = fields.Integer()
