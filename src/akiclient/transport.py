"""HTTP transport for the upstream game API.

This module knows the routes of the API and how to turn one route call into
a classified result. It never retries: a failed call is reported once and the
caller decides whether another endpoint should be tried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from akiclient.exceptions import ResponseFormatError, TransportError
from akiclient.models import Endpoint, Envelope
from akiclient.status import Status, classify

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
DEFAULT_CONNECT_TIMEOUT = 2.5
DEFAULT_READ_TIMEOUT = 10.0

FRONT_ADDRESS = "NDYuMTA1LjExMC40NQ=="
QUESTION_FILTER = ("question_filter", "cat=1")


# =============================================================================
# Routes
# =============================================================================


@dataclass(frozen=True)
class Route:
    """One API route with its fixed and profanity-filter query parameters."""

    path: str
    required: tuple[str, ...]
    fixed: tuple[tuple[str, str], ...] = ()
    filtered: tuple[tuple[str, str], ...] = ()

    def build_params(
        self, params: dict[str, Any], filter_profanity: bool = False
    ) -> dict[str, str]:
        """Assemble the query string parameters for a call.

        Raises:
            ValueError: If a required parameter is missing.
        """
        missing = [name for name in self.required if params.get(name) is None]
        if missing:
            raise ValueError(
                f"Route {self.path} is missing parameters: {', '.join(missing)}"
            )

        query: dict[str, str] = dict(self.fixed)
        query.update({name: str(params[name]) for name in self.required})
        if filter_profanity:
            query.update(self.filtered)
        return query


NEW_SESSION = Route(
    "new_session",
    required=("player", "uid_ext_session"),
    fixed=(
        ("partner", "5"),
        ("constraint", "ETAT<>'AV'"),
        ("frontaddr", FRONT_ADDRESS),
    ),
    filtered=(("soft_constraint", "ETAT='EN'"), QUESTION_FILTER),
)

ANSWER = Route(
    "answer",
    required=("session", "signature", "step", "answer"),
    filtered=(QUESTION_FILTER,),
)

CANCEL_ANSWER = Route(
    "cancel_answer",
    required=("session", "signature", "step"),
    fixed=(("answer", "-1"),),
    filtered=(QUESTION_FILTER,),
)

LIST = Route(
    "list",
    required=("session", "signature", "step"),
    fixed=(("mode_question", "0"),),
)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class RouteResult:
    """Classified outcome of one route call.

    ``status`` is always present; ``parameters`` holds the route specific
    payload when the server sent one.
    """

    endpoint: Endpoint
    status: Status
    parameters: dict[str, Any] | None = field(default=None)

    def payload(self, model: type[T]) -> T:
        """Validate the parameters against a route payload model.

        Raises:
            ResponseFormatError: If the payload is missing or malformed.
        """
        if self.parameters is None:
            raise ResponseFormatError(
                f"Response from {self.endpoint} carries no parameters"
            )
        try:
            return model.model_validate(self.parameters)
        except ValidationError as e:
            raise ResponseFormatError(
                f"Unexpected {model.__name__} payload from {self.endpoint}: {e}"
            ) from e


# =============================================================================
# Transport
# =============================================================================


class ApiTransport:
    """Blocking HTTP transport bound to no particular endpoint.

    Example:
        with ApiTransport(user_agent="my-bot/1.0") as transport:
            result = transport.call(endpoint, NEW_SESSION, params)
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            http_client: Client to send requests with. When omitted, one is
                created and closed together with the transport.
            user_agent: User-Agent header sent with every request.
            connect_timeout: Connection timeout in seconds.
            read_timeout: Read timeout in seconds.
        """
        self.user_agent = user_agent
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=self.timeout)

    @property
    def http_client(self) -> httpx.Client:
        return self._http

    def __enter__(self) -> ApiTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if the transport created it."""
        if self._owns_client:
            self._http.close()

    def call(
        self,
        endpoint: Endpoint,
        route: Route,
        params: dict[str, Any],
        *,
        filter_profanity: bool = False,
        timeout: httpx.Timeout | float | None = None,
    ) -> RouteResult:
        """Call a route on an endpoint and classify the response.

        ERROR statuses are returned, not raised; see
        :func:`akiclient.status.raise_for_status`.

        Args:
            endpoint: Endpoint to call.
            route: Route to call.
            params: Values for the route's required parameters.
            filter_profanity: Append the route's profanity filter parameters.
            timeout: Overrides the transport timeout for this call.

        Returns:
            The classified result.

        Raises:
            TransportError: If the request fails or the HTTP status is >= 400.
            ResponseFormatError: If the body is not a valid envelope.
        """
        url = endpoint.base_url + route.path
        query = route.build_params(params, filter_profanity)
        logger.debug("Request %s on %s", route.path, endpoint)

        try:
            response = self._http.get(
                url,
                params=query,
                headers={"User-Agent": self.user_agent},
                timeout=timeout if timeout is not None else self.timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request to {endpoint} timed out: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"Request to {endpoint} failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                "HTTP %d from %s for %s", response.status_code, endpoint, route.path
            )
            raise TransportError(
                f"HTTP {response.status_code} from {endpoint}",
                status_code=response.status_code,
            )

        try:
            envelope = Envelope.model_validate(response.json())
        except ValueError as e:
            # ValidationError is a ValueError, as is a JSON decoding error
            raise ResponseFormatError(
                f"Response from {endpoint} is not a valid envelope: {e}"
            ) from e

        status = classify(envelope)
        logger.debug("Response %s from %s: %s", route.path, endpoint, status)
        return RouteResult(
            endpoint=endpoint, status=status, parameters=envelope.parameters
        )
