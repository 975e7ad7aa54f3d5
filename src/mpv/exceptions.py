"""Exception classes for the mpv IPC client."""

from src.errors import ProtocolError, TransportError


class MpvConnectionError(TransportError):
    """The control socket could not be reached or did not answer in time.

    Usually means the player is not running.
    """

    def __init__(self, socket_path: str, cause: BaseException):
        self.socket_path = socket_path
        self.cause = cause
        super().__init__(f"mpv: cannot talk to socket {socket_path}: {cause!r}")


class MpvDecodeError(ProtocolError):
    """The reply was empty, truncated, not JSON, or not the expected shape."""

    pass


class MpvPropertyError(ProtocolError):
    """mpv answered a property read with an error (e.g. "property unavailable").

    Attributes:
        name: Property name that was read
        message: Error string reported by mpv
    """

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message
        super().__init__(f"mpv: get_property {name}: {message}")
