"""
Error Taxonomy

Every failure a service raises is one of three kinds, each carrying the HTTP
status class the API layer answers with:

    - ValidationError: missing/malformed input, unknown enum label, empty
      order. The caller fixes the request.
    - NotFoundError: a referenced id does not exist.
    - PersistenceError: the storage layer failed (constraint violation, I/O).
      Not retried; the driver message is surfaced as-is.
"""

from pydantic import ValidationError as PydanticValidationError


class RestaurantAdminError(Exception):
    """Base class for errors surfaced to API callers as {"error": message}."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RestaurantAdminError):
    status_code = 400

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Collapse pydantic's error list into a single readable message."""
        return cls(describe_errors(exc.errors()))


class NotFoundError(RestaurantAdminError):
    status_code = 404


class PersistenceError(RestaurantAdminError):
    status_code = 500


def describe_errors(errors) -> str:
    """
    Render pydantic/FastAPI error dicts as "field: message; field: message".

    The leading "body"/"query" location segment FastAPI adds is dropped.
    """
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        msg = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"
