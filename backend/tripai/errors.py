"""
Error taxonomy shared by the services and the HTTP layer.

Every failure a caller can observe is one of these classes. Each carries a
stable ``kind`` string and the HTTP status the API renders it with, so the
route handlers never translate errors by hand.
"""
from typing import Optional


class TripAIError(Exception):
    kind = "internal_error"
    status_code = 500
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": {"kind": self.kind, "message": self.message}}


class ValidationError(TripAIError):
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid input."


class Conflict(TripAIError):
    kind = "conflict"
    status_code = 409
    default_message = "This email is already registered."


class InvalidCredentials(TripAIError):
    kind = "invalid_credentials"
    status_code = 401
    default_message = "Invalid email or password."


class Unauthenticated(TripAIError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Missing or invalid credential."


class NotFound(TripAIError):
    kind = "not_found"
    status_code = 404
    default_message = "Trip not found."


class ProviderUnavailable(TripAIError):
    kind = "provider_unavailable"
    status_code = 503
    default_message = "Itinerary provider is not configured."


class QuotaExceeded(TripAIError):
    kind = "quota_exceeded"
    status_code = 429
    default_message = "Itinerary provider quota exceeded."


class GenerationFailed(TripAIError):
    kind = "generation_failed"
    status_code = 502
    default_message = "Could not generate the itinerary. Try again."


class MalformedResponse(TripAIError):
    kind = "malformed_response"
    status_code = 502
    default_message = "Provider response is not valid JSON."


class SchemaError(TripAIError):
    kind = "schema_error"
    status_code = 502
    default_message = "Provider response does not match the itinerary shape."
