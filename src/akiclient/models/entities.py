"""Domain entities for the guessing game client.

Endpoints and groups are frozen dataclasses so they can be shared freely
between builders. Questions and guesses are immutable Pydantic snapshots of
a single protocol response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    """Languages served by the upstream API."""

    ARABIC = "ar"
    CHINESE = "zh"
    DUTCH = "nl"
    ENGLISH = "en"
    FRENCH = "fr"
    GERMAN = "de"
    HEBREW = "he"
    HINDI = "hi"
    ITALIAN = "it"
    JAPANESE = "ja"
    KOREAN = "ko"
    POLISH = "pl"
    PORTUGUESE = "pt"
    RUSSIAN = "ru"
    SPANISH = "es"
    TURKISH = "tr"


class Category(str, Enum):
    """What the player is thinking of."""

    CHARACTER = "character"
    # No built-in servers; only reachable through a custom catalog
    OBJECT = "object"
    ANIMAL = "animal"


class Answer(int, Enum):
    """Closed set of answers accepted by the answer route.

    Values are the wire codes.
    """

    YES = 0
    NO = 1
    DONT_KNOW = 2
    PROBABLY = 3
    PROBABLY_NOT = 4


# =============================================================================
# Endpoints
# =============================================================================


@dataclass(frozen=True)
class Endpoint:
    """A single server hosting the game for one language/category pair.

    Equality and hashing only consider the host.
    """

    host: str
    language: Language = field(default=Language.ENGLISH, compare=False)
    category: Category = field(default=Category.CHARACTER, compare=False)

    def __post_init__(self) -> None:
        host = self.host.strip()
        if not host:
            raise ValueError("Endpoint host must not be empty")
        object.__setattr__(self, "host", host)

    @property
    def base_url(self) -> str:
        return f"http://{self.host}/ws/"

    def __str__(self) -> str:
        return self.host


@dataclass(frozen=True)
class EndpointGroup:
    """Ordered redundancy set of endpoints for one language/category pair.

    The order is significant: earlier members are tried first.
    """

    language: Language
    category: Category
    endpoints: tuple[Endpoint, ...]

    def __post_init__(self) -> None:
        if not self.endpoints:
            raise ValueError("An endpoint group needs at least one endpoint")
        object.__setattr__(self, "endpoints", tuple(self.endpoints))

    @classmethod
    def from_hosts(
        cls, language: Language, category: Category, hosts: list[str]
    ) -> EndpointGroup:
        """Build a group from plain host strings."""
        return cls(
            language=language,
            category=category,
            endpoints=tuple(Endpoint(h, language, category) for h in hosts),
        )

    def __len__(self) -> int:
        return len(self.endpoints)

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self.endpoints)

    def __getitem__(self, index: int) -> Endpoint:
        return self.endpoints[index]

    def cursor(self) -> GroupCursor:
        """Return a cursor positioned on the first endpoint."""
        return GroupCursor(self, 0)


@dataclass(frozen=True)
class GroupCursor:
    """Position of one caller's walk through an endpoint group.

    Cursors are values: advancing returns a new cursor, so two callers
    iterating the same shared group never disturb each other.
    """

    group: EndpointGroup
    index: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.index < len(self.group):
            raise IndexError(
                f"Cursor index {self.index} outside group of {len(self.group)}"
            )

    @property
    def current(self) -> Endpoint:
        return self.group[self.index]

    @property
    def remaining(self) -> int:
        """Number of endpoints after the current one."""
        return len(self.group) - self.index - 1

    def advance(self) -> GroupCursor | None:
        """Return the cursor for the next endpoint, or None when exhausted."""
        if self.remaining == 0:
            return None
        return GroupCursor(self.group, self.index + 1)


# =============================================================================
# Protocol snapshots
# =============================================================================


class Question(BaseModel):
    """A question as returned by one protocol call."""

    model_config = ConfigDict(frozen=True)

    step: int = Field(ge=0)
    text: str
    progression: float = Field(ge=0.0, le=100.0)


class Guess(BaseModel):
    """A candidate answer proposed by the server."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    probability: float = Field(ge=0.0, le=1.0)
    description: str | None = None
    image: str | None = None
    explicit: bool = False


def rank_guesses(guesses: list[Guess]) -> list[Guess]:
    """Sort guesses by descending probability, keeping payload order on ties."""
    return sorted(guesses, key=lambda g: g.probability, reverse=True)
