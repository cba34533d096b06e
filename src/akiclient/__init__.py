"""Client for a guessing game's undocumented HTTP API.

Finds a reachable server for a language/category pair, opens a game session
on it and drives the question/answer/guess protocol.

Usage:
    from akiclient import Answer, ClientBuilder, ClientConfig, Language

    with ClientBuilder().build(ClientConfig(language=Language.ENGLISH)) as client:
        client.answer(Answer.YES)
        guess = client.suggest_guess(min_probability=0.85)
"""

from akiclient.builder import Client, ClientBuilder
from akiclient.catalog import DEFAULT_CATALOG, EndpointCatalog
from akiclient.config import ClientConfig
from akiclient.credentials import (
    CredentialProvider,
    ScrapingCredentialProvider,
    StaticCredentials,
)
from akiclient.exceptions import (
    AkiClientError,
    CredentialError,
    EndpointUnavailableError,
    GroupUnavailableError,
    InvalidAnswerError,
    NothingToUndoError,
    ProtocolError,
    ResponseFormatError,
    ServerNotFoundError,
    SessionLostError,
    SessionTerminatedError,
    TransportError,
    UnsupportedCombinationError,
)
from akiclient.models import (
    Answer,
    Category,
    Endpoint,
    EndpointGroup,
    GroupCursor,
    Guess,
    Language,
    Question,
)
from akiclient.selection import EndpointProber, ServerGroupSelector
from akiclient.session import Session, SessionEngine, SessionState
from akiclient.status import Status, StatusLevel, classify
from akiclient.transport import ApiTransport

__version__ = "0.1.0"

__all__ = [
    # Building
    "Client",
    "ClientBuilder",
    "ClientConfig",
    "EndpointCatalog",
    "DEFAULT_CATALOG",
    # Credentials
    "CredentialProvider",
    "StaticCredentials",
    "ScrapingCredentialProvider",
    # Protocol
    "ApiTransport",
    "EndpointProber",
    "ServerGroupSelector",
    "Session",
    "SessionEngine",
    "SessionState",
    "Status",
    "StatusLevel",
    "classify",
    # Entities
    "Answer",
    "Category",
    "Endpoint",
    "EndpointGroup",
    "GroupCursor",
    "Guess",
    "Language",
    "Question",
    # Errors
    "AkiClientError",
    "CredentialError",
    "EndpointUnavailableError",
    "GroupUnavailableError",
    "InvalidAnswerError",
    "NothingToUndoError",
    "ProtocolError",
    "ResponseFormatError",
    "ServerNotFoundError",
    "SessionLostError",
    "SessionTerminatedError",
    "TransportError",
    "UnsupportedCombinationError",
]
