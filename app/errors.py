# app/errors.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

log = logging.getLogger(__name__)


class CinemaError(Exception):
    """Base class for domain errors. `status_code` is what the API answers with."""

    status_code: int = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CinemaError):
    status_code = 400
    default_message = "Invalid input"


class AuthenticationError(CinemaError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(CinemaError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(CinemaError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CinemaError):
    status_code = 409
    default_message = "Already exists"


def translate_integrity_error(exc: IntegrityError, *, conflict_message: str | None = None) -> CinemaError:
    """
    Map a storage constraint violation to the nearest domain error.
    The raw driver message is logged, never surfaced.
    """
    raw = str(getattr(exc, "orig", None) or exc)
    lowered = raw.lower()
    log.info("integrity error translated: %s", raw)

    if "check constraint" in lowered or "movie_or_series" in lowered:
        return ValidationError("Exactly one of movie_id or series_id must be set")
    if "foreign key" in lowered:
        return NotFoundError("Referenced entity does not exist")
    return ConflictError(conflict_message)


__all__ = [
    "CinemaError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "translate_integrity_error",
]
