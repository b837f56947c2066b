"""
Error taxonomy for the travel planner API.

Every error raised from a service carries the HTTP status it maps to and a
message that is safe to show to the caller. The API layer converts them into
a uniform ``{"error": message}`` body; none of them are retried.
"""

from typing import Any, Dict, Optional


class TripPlannerError(Exception):
    """Base class for errors surfaced at the request boundary."""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None, *, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class AuthenticationRequired(TripPlannerError):
    """No authenticated identity in the request context."""

    status_code = 401
    default_message = "Authentication required"


class ValidationError(TripPlannerError):
    """A required request field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request data"


class NotFound(TripPlannerError):
    """Entity is absent or owned by another user; the two are indistinguishable."""

    status_code = 404
    default_message = "Not found"


class UpstreamCallFailed(TripPlannerError):
    """A generation, weather or translation call raised."""

    status_code = 502
    default_message = "Upstream service call failed"


class ParseError(TripPlannerError):
    """Upstream text was not valid JSON or did not match the expected shape."""

    status_code = 502
    default_message = "Failed to parse response data"


class StorageError(TripPlannerError):
    """A persistence write or transaction failed."""

    status_code = 500
    default_message = "Storage operation failed"
