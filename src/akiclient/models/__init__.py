"""Pydantic models and entities for the guessing game client.

Usage:
    from akiclient.models import Endpoint, EndpointGroup, Language, Category
    from akiclient.models import Answer, Guess, Question
"""

# Wire models
from akiclient.models.api import (
    Envelope,
    GuessElement,
    Identification,
    ListElement,
    ListParameters,
    NewSessionParameters,
    StepInformation,
)

# Entities
from akiclient.models.entities import (
    Answer,
    Category,
    Endpoint,
    EndpointGroup,
    GroupCursor,
    Guess,
    Language,
    Question,
    rank_guesses,
)

__all__ = [
    # Entities
    "Language",
    "Category",
    "Answer",
    "Endpoint",
    "EndpointGroup",
    "GroupCursor",
    "Question",
    "Guess",
    "rank_guesses",
    # Wire
    "Envelope",
    "StepInformation",
    "Identification",
    "NewSessionParameters",
    "GuessElement",
    "ListElement",
    "ListParameters",
]
