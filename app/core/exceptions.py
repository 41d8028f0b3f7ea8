"""Domain exceptions raised by services and mapped to HTTP errors by endpoints."""


class JakcaError(Exception):
    """Base class for service-level errors."""


class MissingCoordinatesError(JakcaError):
    """Latitude or longitude was not supplied."""

    def __init__(self, message: str = "latitude and longitude are required") -> None:
        super().__init__(message)


class UpstreamError(JakcaError):
    """An external service (Kakao Local, Supabase Auth) rejected or failed a call."""


class NotFoundError(JakcaError):
    """A cafe, review or user the caller asked for does not exist."""


class AuthenticationError(JakcaError):
    """The identity provider could not authenticate the request."""


class ReviewSubmissionError(JakcaError):
    """Review submission failed; nothing was persisted."""
