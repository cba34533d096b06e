"""Status classification for upstream response envelopes.

The ``completion`` string of every envelope encodes a level and an optional
reason, e.g. ``"OK"``, ``"WARN - NO QUESTION"`` or ``"KO - SERVER DOWN"``.
This module is the single place that interprets it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from akiclient.exceptions import (
    AkiClientError,
    EndpointUnavailableError,
    ProtocolError,
    ResponseFormatError,
)
from akiclient.models import Endpoint, Envelope

SERVER_DOWN = "server down"


class StatusLevel(Enum):
    """Severity of a response."""

    OK = "OK"
    WARNING = "WARN"
    ERROR = "KO"


class Status(BaseModel):
    """Decoded status block of one response."""

    model_config = ConfigDict(frozen=True)

    level: StatusLevel
    reason: str | None = None

    @classmethod
    def parse(cls, completion: str) -> Status:
        """Parse a completion string.

        Raises:
            ResponseFormatError: If the level prefix is not recognised.
        """
        head, _, tail = completion.partition("-")
        try:
            level = StatusLevel(head.strip().upper())
        except ValueError:
            raise ResponseFormatError(
                f"Unrecognised completion status: {completion!r}"
            ) from None
        reason = tail.strip().lower() or None
        return cls(level=level, reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.level is StatusLevel.OK

    @property
    def is_server_down(self) -> bool:
        return (
            self.level is StatusLevel.ERROR
            and self.reason is not None
            and self.reason.casefold() == SERVER_DOWN
        )

    def to_error(self, endpoint: Endpoint | None = None) -> AkiClientError | None:
        """Return the exception an ERROR status maps to, or None otherwise."""
        if self.level is not StatusLevel.ERROR:
            return None
        if self.is_server_down:
            return EndpointUnavailableError(endpoint)
        return ProtocolError(self.reason or "unknown error")

    def __str__(self) -> str:
        if self.reason:
            return f"{self.level.name} ({self.reason})"
        return self.level.name


def classify(envelope: Envelope) -> Status:
    """Classify a decoded envelope. Pure function of its input."""
    return Status.parse(envelope.completion)


def raise_for_status(status: Status, endpoint: Endpoint | None = None) -> Status:
    """Raise the classified error for ERROR statuses, pass others through.

    Raises:
        EndpointUnavailableError: If the endpoint reported "server down".
        ProtocolError: For any other ERROR reason.
    """
    error = status.to_error(endpoint)
    if error is not None:
        raise error
    return status
