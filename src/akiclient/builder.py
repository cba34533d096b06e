"""Client builder and client facade.

The builder resolves where a session should live, either a single explicit
endpoint or an endpoint group, and consumes the group's redundancy exactly
once per failed candidate, in declared order, until a session is established.
"""

from __future__ import annotations

import logging

import httpx

from akiclient.catalog import DEFAULT_CATALOG, EndpointCatalog
from akiclient.config import ClientConfig
from akiclient.credentials import CredentialProvider, ScrapingCredentialProvider
from akiclient.exceptions import (
    AkiClientError,
    CredentialError,
    EndpointUnavailableError,
    GroupUnavailableError,
    ServerNotFoundError,
)
from akiclient.models import (
    Answer,
    Endpoint,
    EndpointGroup,
    GroupCursor,
    Guess,
    Question,
)
from akiclient.selection import EndpointProber, ServerGroupSelector
from akiclient.session import Session, SessionEngine, SessionState
from akiclient.transport import ApiTransport

logger = logging.getLogger(__name__)


class Client:
    """A game in progress on one endpoint.

    Thin facade binding a :class:`SessionEngine` to the session it created.
    Not safe for concurrent use; use one client per thread.

    Example:
        config = ClientConfig(language=Language.ENGLISH)
        with ClientBuilder().build(config) as client:
            print(client.question.text)
            client.answer(Answer.YES)
            guess = client.suggest_guess(min_probability=0.85)
    """

    def __init__(
        self, engine: SessionEngine, session: Session, transport: ApiTransport
    ) -> None:
        self._engine = engine
        self._session = session
        self._transport = transport

    def __enter__(self) -> Client:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the transport. The server side session simply expires."""
        self._transport.close()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def endpoint(self) -> Endpoint:
        return self._session.endpoint

    @property
    def question(self) -> Question | None:
        """Current question, None once the question pool is exhausted."""
        return self._session.question

    @property
    def step(self) -> int:
        return self._session.step

    @property
    def state(self) -> SessionState:
        return self._session.state

    def answer(self, answer: Answer) -> Question | None:
        return self._engine.answer(self._session, answer)

    def undo_answer(self) -> Question | None:
        return self._engine.undo_answer(self._session)

    def guesses(self) -> list[Guess]:
        return self._engine.list_guesses(self._session)

    def suggest_guess(self, min_probability: float = 0.0) -> Guess | None:
        return self._engine.suggest_guess(self._session, min_probability)

    def confirm_guess(self, guess: Guess) -> None:
        self._engine.confirm_guess(self._session, guess)

    def reject_guess(self, guess: Guess) -> None:
        self._engine.reject_guess(self._session, guess)

    def reject_last_guess(self) -> Guess | None:
        return self._engine.reject_last_guess(self._session)


class ClientBuilder:
    """Builds clients, failing over through endpoint groups.

    Example:
        builder = ClientBuilder(catalog=DEFAULT_CATALOG)
        client = builder.build(ClientConfig(language=Language.FRENCH))
    """

    def __init__(
        self,
        catalog: EndpointCatalog = DEFAULT_CATALOG,
        http_client: httpx.Client | None = None,
        credentials: CredentialProvider | None = None,
    ) -> None:
        """Initialize the builder.

        Args:
            catalog: Catalog used when the config names no endpoint or group.
            http_client: HTTP client shared by built clients. When omitted each
                client owns a fresh one.
            credentials: Credential provider. Defaults to scraping the
                credential with the client's own HTTP client.
        """
        self._catalog = catalog
        self._http_client = http_client
        self._credentials = credentials

    def build(self, config: ClientConfig | None = None) -> Client:
        """Establish a session and return a client bound to it.

        Raises:
            UnsupportedCombinationError: If the catalog has no group for the
                configured language and category.
            ServerNotFoundError: If no candidate of the group hosted a session.
            CredentialError: If no credential could be obtained.
            AkiClientError: Any establishment failure on an explicit endpoint.
        """
        config = config or ClientConfig()
        transport = ApiTransport(
            self._http_client,
            user_agent=config.user_agent,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )
        credentials = self._credentials or ScrapingCredentialProvider(
            transport.http_client
        )
        engine = SessionEngine(transport, credentials)

        try:
            session = self._establish(engine, transport, credentials, config)
        except BaseException:
            transport.close()
            raise
        return Client(engine, session, transport)

    def _establish(
        self,
        engine: SessionEngine,
        transport: ApiTransport,
        credentials: CredentialProvider,
        config: ClientConfig,
    ) -> Session:
        if config.endpoint is not None:
            logger.debug("Explicit server %s given, attempting once", config.endpoint)
            return engine.establish(
                config.endpoint, config.player_name, config.filter_profanity
            )

        group = config.group or self._catalog.lookup(config.language, config.category)
        selector = None
        if config.probe_first:
            prober = EndpointProber(transport, credentials, config.probe_timeout)
            selector = ServerGroupSelector(prober)
        return self._establish_on_group(engine, group, config, selector)

    def _establish_on_group(
        self,
        engine: SessionEngine,
        group: EndpointGroup,
        config: ClientConfig,
        selector: ServerGroupSelector | None,
    ) -> Session:
        cursor: GroupCursor | None = group.cursor()
        last_error: Exception | None = None

        while cursor is not None:
            if selector is not None:
                try:
                    cursor = selector.select_from(cursor)
                except GroupUnavailableError as e:
                    last_error = e
                    break

            endpoint = cursor.current
            logger.debug(
                "Using server %d out of %d: %s", cursor.index + 1, len(group), endpoint
            )
            try:
                return engine.establish(
                    endpoint, config.player_name, config.filter_profanity
                )
            except EndpointUnavailableError as e:
                logger.debug("Server %s seems to be down", endpoint)
                last_error = e
            except CredentialError:
                raise
            except AkiClientError as e:
                logger.warning(
                    "Failed to establish a session on %s, trying the next server: %s",
                    endpoint,
                    e,
                )
                last_error = e
            except Exception as e:
                logger.exception(
                    "Unexpected error on %s, trying the next server", endpoint
                )
                last_error = e
            cursor = cursor.advance()

        raise ServerNotFoundError(
            f"No server available for language={group.language.value}, "
            f"category={group.category.value}"
        ) from last_error
