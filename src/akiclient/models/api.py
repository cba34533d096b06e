"""Wire models for the upstream game API.

Every route answers with the same envelope, a ``completion`` status string
next to a route specific ``parameters`` object. The envelope is decoded once
and the parameters are validated against the payload model of the route that
was called.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from akiclient.models.entities import Guess, Question

NO_PICTURE_SUFFIX = "none.jpg"


class Envelope(BaseModel):
    """Outer shape shared by all responses."""

    model_config = ConfigDict(extra="ignore")

    completion: str
    parameters: dict[str, Any] | None = None


# =============================================================================
# Session creation / answer / cancel
# =============================================================================


class StepInformation(BaseModel):
    """The current question, as sent by new_session, answer and cancel_answer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    question: str
    step: int = Field(ge=0)
    progression: float
    question_id: str | None = Field(default=None, alias="questionid")

    def to_question(self) -> Question:
        # Servers occasionally report progression a hair above 100
        progression = min(max(self.progression, 0.0), 100.0)
        return Question(step=self.step, text=self.question, progression=progression)


class Identification(BaseModel):
    """Session identity issued by new_session."""

    model_config = ConfigDict(extra="ignore")

    session: str
    signature: str
    channel: int | None = None


class NewSessionParameters(BaseModel):
    """Parameters of a new_session response."""

    model_config = ConfigDict(extra="ignore")

    identification: Identification
    step_information: StepInformation


# =============================================================================
# Guess listing
# =============================================================================


class GuessElement(BaseModel):
    """A single guess as listed by the list route."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    probability: float = Field(alias="proba", ge=0.0, le=1.0)
    description: str | None = None
    picture_path: str | None = Field(default=None, alias="absolute_picture_path")
    corrupt: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    def to_guess(self) -> Guess:
        image = self.picture_path
        if image is not None and (not image or image.endswith(NO_PICTURE_SUFFIX)):
            image = None
        return Guess(
            id=self.id,
            name=self.name,
            probability=self.probability,
            description=self.description or None,
            image=image,
            explicit=self.corrupt,
        )


class ListElement(BaseModel):
    """Wrapper object around each listed guess."""

    model_config = ConfigDict(extra="ignore")

    element: GuessElement


class ListParameters(BaseModel):
    """Parameters of a list response."""

    model_config = ConfigDict(extra="ignore")

    elements: list[ListElement] = Field(default_factory=list)

    def to_guesses(self) -> list[Guess]:
        return [item.element.to_guess() for item in self.elements]
