"""Endpoint probing and server group selection.

Probing answers "can this endpoint create a session right now?" without
raising for ordinary unreachability. The selector walks a group in its
declared order and turns exhaustion into a hard failure.
"""

from __future__ import annotations

import logging

import httpx

from akiclient.config import (
    DEFAULT_FILTER_PROFANITY,
    DEFAULT_PLAYER_NAME,
    DEFAULT_PROBE_TIMEOUT,
)
from akiclient.credentials import CredentialProvider
from akiclient.exceptions import (
    GroupUnavailableError,
    ResponseFormatError,
    TransportError,
)
from akiclient.models import Endpoint, EndpointGroup, GroupCursor
from akiclient.transport import NEW_SESSION, ApiTransport

logger = logging.getLogger(__name__)


class EndpointProber:
    """Checks endpoint reachability with a trial session creation."""

    def __init__(
        self,
        transport: ApiTransport,
        credentials: CredentialProvider,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        """Initialize the prober.

        Args:
            transport: Transport used for the probe call.
            credentials: Source of the session creation credential.
            timeout: Connection timeout of a probe in seconds.
        """
        self._transport = transport
        self._credentials = credentials
        self.timeout = timeout

    def probe(self, endpoint: Endpoint) -> bool:
        """Return True if a session can be created on the endpoint.

        Raises:
            CredentialError: If the credential cannot be obtained. This is
                not a reachability failure of the endpoint.
        """
        params = {
            "player": DEFAULT_PLAYER_NAME,
            "uid_ext_session": self._credentials.get(),
        }
        timeout = httpx.Timeout(self._transport.timeout.read, connect=self.timeout)
        try:
            result = self._transport.call(
                endpoint,
                NEW_SESSION,
                params,
                filter_profanity=DEFAULT_FILTER_PROFANITY,
                timeout=timeout,
            )
        except (TransportError, ResponseFormatError) as e:
            logger.debug("Probe of %s failed: %s", endpoint, e)
            return False

        if not result.status.is_ok:
            logger.debug("Probe of %s returned %s", endpoint, result.status)
            return False

        logger.debug("Probe of %s succeeded", endpoint)
        return True


class ServerGroupSelector:
    """Selects the first reachable endpoint of a group.

    Members are probed one at a time in declared order, each at most once.

    Example:
        selector = ServerGroupSelector(prober)
        endpoint = selector.select_first_available(group)
    """

    def __init__(self, prober: EndpointProber) -> None:
        self._prober = prober

    def select_first_available(self, group: EndpointGroup) -> Endpoint:
        """Return the first endpoint of the group that passes its probe.

        Raises:
            GroupUnavailableError: If every endpoint fails its probe.
        """
        return self.select_from(group.cursor()).current

    def select_from(self, cursor: GroupCursor) -> GroupCursor:
        """Walk the group from ``cursor`` and stop on the first reachable endpoint.

        Returns:
            A cursor positioned on the reachable endpoint.

        Raises:
            GroupUnavailableError: If no endpoint from ``cursor`` onwards is
                reachable.
        """
        position: GroupCursor | None = cursor
        while position is not None:
            if self._prober.probe(position.current):
                logger.info("Selected server %s", position.current)
                return position
            logger.debug(
                "Server %s unreachable, %d candidates left",
                position.current,
                position.remaining,
            )
            position = position.advance()

        raise GroupUnavailableError(cursor.group)
