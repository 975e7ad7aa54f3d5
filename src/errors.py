"""Error taxonomy shared by the catalog and player clients.

Every failure raised by this project derives from NavituiError. Callers that
only care whether an operation failed can catch that; callers that need to
tell "player not running" from "player answered with an error" can catch
TransportError and ProtocolError separately.
"""


class NavituiError(Exception):
    """Base exception for all navitui errors."""

    pass


class ConfigurationError(NavituiError):
    """Missing or invalid configuration (credentials, address, socket path).

    Raised before any network activity takes place.
    """

    pass


class TransportError(NavituiError):
    """The remote side could not be reached or did not answer in time.

    Covers DNS, connect, read and timeout failures on both the HTTP channel
    and the player socket.
    """

    pass


class ProtocolError(NavituiError):
    """The remote side answered, but reported a failure or sent a body that
    could not be decoded."""

    pass
