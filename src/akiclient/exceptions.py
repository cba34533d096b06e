"""Custom exceptions for the guessing game client.

This module defines the exception hierarchy for endpoint selection, session
establishment and session protocol errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from akiclient.models import Category, Endpoint, EndpointGroup, Language


class AkiClientError(Exception):
    """Base exception for all client errors."""

    pass


# =============================================================================
# Endpoint selection
# =============================================================================


class UnsupportedCombinationError(AkiClientError):
    """Raised when no endpoint group is registered for a language/category pair."""

    def __init__(self, language: Language, category: Category):
        super().__init__(
            f"No servers registered for language={language.value}, "
            f"category={category.value}"
        )
        self.language = language
        self.category = category


class EndpointUnavailableError(AkiClientError):
    """Raised when an endpoint reports that it is down."""

    def __init__(self, endpoint: Endpoint | None = None):
        host = endpoint.host if endpoint is not None else "<unknown>"
        super().__init__(f"Server {host} is down")
        self.endpoint = endpoint


class GroupUnavailableError(AkiClientError):
    """Raised when every endpoint of a group fails its probe."""

    def __init__(self, group: EndpointGroup):
        super().__init__(
            f"None of the {len(group)} servers for language={group.language.value}, "
            f"category={group.category.value} is reachable"
        )
        self.group = group


class ServerNotFoundError(AkiClientError):
    """Raised when no candidate endpoint could host a session."""

    pass


# =============================================================================
# Wire level
# =============================================================================


class TransportError(AkiClientError):
    """Raised when the HTTP round trip itself fails (timeout, refused, 5xx)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(AkiClientError):
    """Raised when a response cannot be decoded into the expected payload."""

    pass


class CredentialError(AkiClientError):
    """Raised when the API credential cannot be obtained."""

    pass


class ProtocolError(AkiClientError):
    """Raised when the server answers with an ERROR status other than "server down"."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


# =============================================================================
# Session protocol
# =============================================================================


class SessionLostError(AkiClientError):
    """Raised when the endpoint of an established session stops serving it."""

    pass


class SessionTerminatedError(AkiClientError):
    """Raised when an operation is attempted on a finished session."""

    pass


class InvalidAnswerError(AkiClientError, ValueError):
    """Raised when an answer outside the closed answer set is submitted."""

    pass


class NothingToUndoError(AkiClientError):
    """Raised when undo is requested on the first question."""

    pass
