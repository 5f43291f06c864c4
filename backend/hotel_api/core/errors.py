"""Domain errors raised by services and mapped to the JSON envelope by the API layer."""
from typing import List, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(AppError):
    """Missing or malformed input. ``errors`` lists every violated field."""
    status_code = 400

    @classmethod
    def from_fields(cls, errors: List[str]) -> "ValidationError":
        return cls("Validation failed: " + "; ".join(errors), errors)


class NotFoundError(AppError):
    status_code = 404


class ForbiddenError(AppError):
    status_code = 403


class UnauthenticatedError(AppError):
    status_code = 401


class PolicyError(AppError):
    """Request is well formed but a business rule blocks it (user-correctable)."""
    status_code = 400


class AvailabilityError(PolicyError):
    TOO_MANY_GUESTS = "too_many_guests"
    UNAVAILABLE = "room_unavailable"
    INVALID_DATES = "invalid_date_range"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
