# Overview: JSON response helpers shared by the blueprints.

from __future__ import annotations

from flask import request

from .errors import InsufficientStockError, LedgerError, NotFoundError, ValidationError
from .services.results import CommandResult


def error_response(exc: LedgerError) -> tuple[dict, int]:
    """Map a failed ledger command to a JSON body and HTTP status."""
    if isinstance(exc, ValidationError):
        return {"error": str(exc), "errors": exc.errors}, 400
    if isinstance(exc, NotFoundError):
        return {"error": f"{exc.entity} not found"}, 404
    if isinstance(exc, InsufficientStockError):
        return {"error": str(exc), "details": exc.details}, 409
    return {"error": str(exc), "details": exc.details}, 400


def with_warnings(body: dict, result: CommandResult) -> dict:
    """Attach persistence warnings; the command itself succeeded."""
    if result.warnings:
        body["warnings"] = list(result.warnings)
    return body


def json_object_body() -> dict | None:
    """
    The request's JSON object, {} when there is no JSON body, or None when
    the body is JSON but not an object.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    return payload if isinstance(payload, dict) else None


NOT_AN_OBJECT = ({"error": "Request body must be a JSON object"}, 400)
