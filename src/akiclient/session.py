"""Session protocol engine.

A session is bound to the endpoint that created it: its id, signature and
step counter mean nothing to any other server. The engine therefore never
moves a session between endpoints; if the bound endpoint reports that it is
down the session is lost.

State machine::

    (no session) --establish--> ACTIVE <--reject / answer / undo--+
                                  |                               |
                                  +--suggest_guess--> GUESS_PENDING
                                  |                               |
                                  +--confirm_guess--> TERMINATED <+
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from akiclient.config import DEFAULT_FILTER_PROFANITY, DEFAULT_PLAYER_NAME
from akiclient.credentials import CredentialProvider
from akiclient.exceptions import (
    EndpointUnavailableError,
    InvalidAnswerError,
    NothingToUndoError,
    SessionLostError,
    SessionTerminatedError,
)
from akiclient.models import (
    Answer,
    Endpoint,
    Guess,
    ListParameters,
    NewSessionParameters,
    Question,
    StepInformation,
    rank_guesses,
)
from akiclient.status import StatusLevel, raise_for_status
from akiclient.transport import (
    ANSWER,
    CANCEL_ANSWER,
    LIST,
    NEW_SESSION,
    ApiTransport,
    Route,
    RouteResult,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle state of an established session."""

    ACTIVE = "active"
    GUESS_PENDING = "guess_pending"
    TERMINATED = "terminated"


@dataclass
class Session:
    """Server-issued session identity plus local protocol bookkeeping."""

    session_id: str
    signature: str
    endpoint: Endpoint
    step: int = 0
    question: Question | None = None
    filter_profanity: bool = False
    state: SessionState = SessionState.ACTIVE
    rejected: set[str] = field(default_factory=set)
    pending_guess: Guess | None = None
    confirmed_guess: Guess | None = None

    @property
    def is_terminated(self) -> bool:
        return self.state is SessionState.TERMINATED

    def identity_params(self) -> dict[str, Any]:
        return {
            "session": self.session_id,
            "signature": self.signature,
            "step": self.step,
        }


class SessionEngine:
    """Drives the question/answer/guess protocol over established sessions.

    The engine holds no per-session state itself; everything lives on the
    :class:`Session`. Sessions are not locked: callers sharing one session
    between threads must serialize access.

    Example:
        engine = SessionEngine(transport, credentials)
        session = engine.establish(endpoint, "Player")
        question = engine.answer(session, Answer.YES)
        guesses = engine.list_guesses(session)
    """

    def __init__(
        self, transport: ApiTransport, credentials: CredentialProvider
    ) -> None:
        self._transport = transport
        self._credentials = credentials

    # =========================================================================
    # Session creation
    # =========================================================================

    def establish(
        self,
        endpoint: Endpoint,
        player_name: str = DEFAULT_PLAYER_NAME,
        filter_profanity: bool = DEFAULT_FILTER_PROFANITY,
    ) -> Session:
        """Create a session on an endpoint.

        Args:
            endpoint: Endpoint to create the session on.
            player_name: Player name sent to the server.
            filter_profanity: Ask the server to filter explicit questions.

        Returns:
            The new session, positioned on its first question.

        Raises:
            EndpointUnavailableError: If the endpoint reported "server down".
            ProtocolError: For any other ERROR status.
            TransportError: If the request failed.
            ResponseFormatError: If the response could not be decoded.
            CredentialError: If no credential could be obtained.
        """
        params = {"player": player_name, "uid_ext_session": self._credentials.get()}
        result = self._transport.call(
            endpoint, NEW_SESSION, params, filter_profanity=filter_profanity
        )
        raise_for_status(result.status, endpoint)
        if result.status.level is StatusLevel.WARNING:
            logger.warning("Session creation on %s: %s", endpoint, result.status)

        payload = result.payload(NewSessionParameters)
        question = payload.step_information.to_question()
        session = Session(
            session_id=payload.identification.session,
            signature=payload.identification.signature,
            endpoint=endpoint,
            step=question.step,
            question=question,
            filter_profanity=filter_profanity,
        )
        logger.info("Established session %s on %s", session.session_id, endpoint)
        return session

    # =========================================================================
    # Questions
    # =========================================================================

    def answer(self, session: Session, answer: Answer) -> Question | None:
        """Answer the current question.

        Returns:
            The next question, or None when the question pool is exhausted.

        Raises:
            InvalidAnswerError: If ``answer`` is not an :class:`Answer`.
            SessionTerminatedError: If the session has ended.
            SessionLostError: If the bound endpoint reported "server down".
            ProtocolError: For any other ERROR status. The step is unchanged.
        """
        if not isinstance(answer, Answer):
            raise InvalidAnswerError(f"Not a valid answer: {answer!r}")
        self._require_open(session)

        params = {**session.identity_params(), "answer": answer.value}
        result = self._call(session, ANSWER, params)
        question = self._read_question(result)

        session.step = self._reconcile_step(session.step + 1, question)
        session.question = question
        self._back_to_active(session)
        return question

    def undo_answer(self, session: Session) -> Question | None:
        """Take back the last answer.

        Returns:
            The previous question.

        Raises:
            NothingToUndoError: If the session is on its first question.
            SessionTerminatedError: If the session has ended.
            SessionLostError: If the bound endpoint reported "server down".
            ProtocolError: For any other ERROR status. The step is unchanged.
        """
        self._require_open(session)
        # The server does not guard against step underflow
        if session.step == 0:
            raise NothingToUndoError("Cannot undo the first question")

        result = self._call(session, CANCEL_ANSWER, session.identity_params())
        question = self._read_question(result)

        session.step = self._reconcile_step(session.step - 1, question)
        session.question = question
        self._back_to_active(session)
        return question

    # =========================================================================
    # Guesses
    # =========================================================================

    def list_guesses(self, session: Session) -> list[Guess]:
        """List the server's guesses for the current step.

        Rejected guesses are left out. Explicit guesses are passed through
        even when profanity filtering was requested.

        Returns:
            Guesses by descending probability; empty when the server has
            nothing to propose yet.
        """
        self._require_open(session)
        result = self._call(session, LIST, session.identity_params())
        if not result.status.is_ok and result.parameters is None:
            logger.debug(
                "No guesses for session %s: %s", session.session_id, result.status
            )
            return []

        guesses = result.payload(ListParameters).to_guesses()
        return rank_guesses([g for g in guesses if g.id not in session.rejected])

    def suggest_guess(
        self, session: Session, min_probability: float = 0.0
    ) -> Guess | None:
        """Propose the best remaining guess for confirmation.

        Returns:
            The top guess, or None if there is none at or above
            ``min_probability``. A returned guess is pending until it is
            confirmed, rejected, or the player answers again.
        """
        guesses = self.list_guesses(session)
        if not guesses or guesses[0].probability < min_probability:
            return None

        session.pending_guess = guesses[0]
        session.state = SessionState.GUESS_PENDING
        return guesses[0]

    def confirm_guess(self, session: Session, guess: Guess) -> None:
        """Mark a guess as right. The session ends."""
        self._require_open(session)
        session.confirmed_guess = guess
        session.pending_guess = None
        session.state = SessionState.TERMINATED
        logger.info("Session %s ended on guess %s", session.session_id, guess.name)

    def reject_guess(self, session: Session, guess: Guess) -> None:
        """Mark a guess as wrong; it will not be listed again in this session."""
        self._require_open(session)
        session.rejected.add(guess.id)
        self._back_to_active(session)

    def reject_last_guess(self, session: Session) -> Guess | None:
        """Reject the pending guess, if any, and return it."""
        guess = session.pending_guess
        if guess is not None:
            self.reject_guess(session, guess)
        return guess

    # =========================================================================
    # Internals
    # =========================================================================

    def _call(
        self, session: Session, route: Route, params: dict[str, Any]
    ) -> RouteResult:
        result = self._transport.call(
            session.endpoint,
            route,
            params,
            filter_profanity=session.filter_profanity,
        )
        try:
            raise_for_status(result.status, session.endpoint)
        except EndpointUnavailableError as e:
            logger.error(
                "Server %s went down during session %s",
                session.endpoint,
                session.session_id,
            )
            raise SessionLostError(
                f"Session {session.session_id} lost: {session.endpoint} is down"
            ) from e
        return result

    @staticmethod
    def _read_question(result: RouteResult) -> Question | None:
        if not result.status.is_ok:
            logger.warning("Server %s returned %s", result.endpoint, result.status)
            # End of the question pool, whatever else the payload carries
            if not result.parameters or "question" not in result.parameters:
                return None
        return result.payload(StepInformation).to_question()

    @staticmethod
    def _reconcile_step(expected: int, question: Question | None) -> int:
        if question is None or question.step == expected:
            return expected
        logger.debug(
            "Server echoed step %d, expected %d; using server value",
            question.step,
            expected,
        )
        return question.step

    @staticmethod
    def _require_open(session: Session) -> None:
        if session.is_terminated:
            raise SessionTerminatedError(
                f"Session {session.session_id} has already ended"
            )

    @staticmethod
    def _back_to_active(session: Session) -> None:
        session.pending_guess = None
        session.state = SessionState.ACTIVE
