"""
Error taxonomy for the room protocol.

Request-scoped errors (ProtocolViolation, AuthorizationError) are reported
back to the connection that caused them. TransportFailure is raised by a
connection's send path and handled per target during fan-out.
InvariantViolation signals a programming error in room bookkeeping.
"""


class CodeMoveError(Exception):
    """Base class for every error raised by the room protocol."""

    code = "CODEMOVE_ERROR"

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail


class ProtocolViolation(CodeMoveError):
    """Malformed frame, or a request no valid client could send."""

    code = "PROTOCOL_VIOLATION"


class AuthorizationError(CodeMoveError):
    """A participant attempted an action its role does not allow."""

    code = "AUTHORIZATION_ERROR"


class TransportFailure(CodeMoveError):
    """Delivery to a single connection failed or timed out."""

    code = "TRANSPORT_FAILURE"

    def __init__(self, connection_id: str, detail: str = ""):
        super().__init__(detail)
        self.connection_id = connection_id


class InvariantViolation(CodeMoveError):
    """Room bookkeeping no longer matches actual membership."""

    code = "INVARIANT_VIOLATION"
