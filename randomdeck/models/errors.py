"""Error taxonomy shared by the relay and the deck selector."""
from enum import Enum
from typing import Any, Dict, Optional, Type


class ErrorKind(str, Enum):
    """Closed set of failure kinds callers can branch on."""

    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    MALFORMED_PAYLOAD = "MALFORMED_PAYLOAD"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    NO_USABLE_DECKS = "NO_USABLE_DECKS"


class RelayError(Exception):
    """Base error for relay and selector operations."""

    kind: ErrorKind
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error": self.message,
            "kind": self.code,
            "details": self.details,
        }


class UnknownPlayer(RelayError):
    kind = ErrorKind.UNKNOWN_PLAYER
    status_code = 404

    def __init__(self, player_id: str, details: Optional[Dict[str, Any]] = None):
        self.player_id = player_id
        details = details or {}
        details.setdefault("player_id", player_id)
        super().__init__(f"Unknown player '{player_id}'", details)


class UpstreamUnavailable(RelayError):
    """The upstream site could not be reached or answered with an error."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    status_code = 502

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        details = details or {}
        if upstream_status is None:
            upstream_status = details.get("upstream_status")
        self.upstream_status = upstream_status
        details["upstream_status"] = upstream_status
        super().__init__(message, details)
        # Mirror real upstream HTTP errors; transport failures stay 502/504.
        if status_code is not None:
            self.status_code = status_code
        elif isinstance(upstream_status, int) and 400 <= upstream_status < 600:
            self.status_code = upstream_status


class ExtractionFailed(RelayError):
    """The embedded data block was not found in the upstream markup."""

    kind = ErrorKind.EXTRACTION_FAILED
    status_code = 502


class MalformedPayload(RelayError):
    """The embedded data block was found but could not be parsed."""

    kind = ErrorKind.MALFORMED_PAYLOAD
    status_code = 502


class SchemaMismatch(RelayError):
    """The payload parsed but no known path led to a deck list."""

    kind = ErrorKind.SCHEMA_MISMATCH
    status_code = 502


class NoUsableDecks(RelayError):
    kind = ErrorKind.NO_USABLE_DECKS
    status_code = 404


ERROR_CLASSES: Dict[ErrorKind, Type[RelayError]] = {
    cls.kind: cls
    for cls in (
        UnknownPlayer,
        UpstreamUnavailable,
        ExtractionFailed,
        MalformedPayload,
        SchemaMismatch,
        NoUsableDecks,
    )
}


def error_from_payload(status_code: int, payload: Any) -> RelayError:
    """Rebuild a typed error from a relay error response body."""
    if not isinstance(payload, dict):
        return UpstreamUnavailable(
            f"Relay answered {status_code} without an error body",
            upstream_status=status_code,
        )

    message = payload.get("error")
    if not isinstance(message, str):
        message = f"Relay answered {status_code}"
    details = payload.get("details")
    details = dict(details) if isinstance(details, dict) else {}

    try:
        kind = ErrorKind(payload.get("kind"))
    except ValueError:
        return UpstreamUnavailable(message, upstream_status=status_code, details=details)

    if kind is ErrorKind.UNKNOWN_PLAYER:
        return UnknownPlayer(str(details.get("player_id", "")), details)
    if kind is ErrorKind.UPSTREAM_UNAVAILABLE:
        return UpstreamUnavailable(message, details=details)

    return ERROR_CLASSES[kind](message, details)
