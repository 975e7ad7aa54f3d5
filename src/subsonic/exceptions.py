"""Exception classes for Subsonic API client."""

from typing import Optional

from src.errors import ProtocolError, TransportError


class SubsonicError(ProtocolError):
    """Base exception for errors reported by the Subsonic API.

    Attributes:
        code: Subsonic error code
        message: Error message from server
        endpoint: Endpoint that reported the error (e.g. "getAlbum")
    """

    def __init__(self, code: int, message: str, endpoint: Optional[str] = None):
        """Initialize Subsonic error.

        Args:
            code: Subsonic error code (0, 10, 20, 30, 40, 50, 60, 70)
            message: Human-readable error message
            endpoint: Endpoint name the request was sent to
        """
        self.code = code
        self.message = message
        self.endpoint = endpoint
        prefix = f"{endpoint}: " if endpoint else ""
        super().__init__(f"{prefix}Subsonic Error {code}: {message}")


class SubsonicAuthenticationError(SubsonicError):
    """Authentication failed (error codes 40, 41).

    Raised when username/password is incorrect.
    """

    pass


class SubsonicAuthorizationError(SubsonicError):
    """User not authorized for requested action (error code 50)."""

    pass


class SubsonicNotFoundError(SubsonicError):
    """Requested resource not found (error code 70).

    Raised when an artist, album or song does not exist.
    """

    pass


class SubsonicVersionError(SubsonicError):
    """API version incompatibility (error codes 20, 30)."""

    pass


class SubsonicParameterError(SubsonicError):
    """Required parameter missing (error code 10)."""

    pass


class SubsonicTrialError(SubsonicError):
    """Trial period expired (error code 60)."""

    pass


class SubsonicResponseError(ProtocolError):
    """Server answered with a non-200 status or an undecodable body.

    Attributes:
        endpoint: Endpoint the request was sent to
        cause: Short description of what was wrong with the response
    """

    def __init__(self, endpoint: str, cause: str):
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"{endpoint}: {cause}")


class SubsonicTransportError(TransportError):
    """Request never produced a response (connect, DNS, read, timeout).

    Attributes:
        endpoint: Endpoint the request was sent to
        cause: Underlying httpx exception
    """

    def __init__(self, endpoint: str, cause: Exception):
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"{endpoint}: request failed: {cause!r}")


# Subsonic error code -> exception type
ERROR_CODES = {
    10: SubsonicParameterError,
    20: SubsonicVersionError,
    30: SubsonicVersionError,
    40: SubsonicAuthenticationError,
    41: SubsonicAuthenticationError,
    50: SubsonicAuthorizationError,
    60: SubsonicTrialError,
    70: SubsonicNotFoundError,
}
