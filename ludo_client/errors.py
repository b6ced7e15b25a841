from enum import Enum


class ErrorKind(Enum):
    """Where a user-visible error came from."""

    INPUT_REJECTED = "input_rejected"  # local: wrong turn, wrong phase, busy
    SERVER_REJECTED = "server_rejected"  # server refused a request
    CONNECTIVITY = "connectivity"  # connection lost or refused
    MALFORMED_PAYLOAD = "malformed_payload"  # server sent something unexpected


class LudoClientError(Exception):
    """Base exception for the Ludo client."""

    kind: ErrorKind = ErrorKind.INPUT_REJECTED


class InputRejected(LudoClientError):
    """Raised when the user acts outside the allowed turn/phase."""

    kind = ErrorKind.INPUT_REJECTED


class AnimationBusy(InputRejected):
    """Raised when a move is requested while another one is animating."""


class MoveRejected(LudoClientError):
    """Raised when the server refuses a move the client predicted as legal."""

    kind = ErrorKind.SERVER_REJECTED


class ConnectionLost(LudoClientError):
    """Raised when an action needs a connection that is not there."""

    kind = ErrorKind.CONNECTIVITY


class MalformedPayload(LudoClientError):
    """Raised when an inbound event payload does not match its schema."""

    kind = ErrorKind.MALFORMED_PAYLOAD

    def __init__(self, event: str, reason: str):
        super().__init__(f"Malformed '{event}' payload: {reason}")
        self.event = event
        self.reason = reason
