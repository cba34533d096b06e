"""API credential providers.

The session creation route needs an opaque ``uid_ext_session`` token that the
game publishes in its front-end page. Providers hand out the current value;
failing to obtain one is reported to the caller that asked for it.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Protocol, runtime_checkable

import httpx

from akiclient.exceptions import CredentialError

logger = logging.getLogger(__name__)

DEFAULT_FRONTEND_URL = "https://en.akinator.com/game"
UID_PATTERN = re.compile(r"var uid_ext_session = '(.*?)'")


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of the current API credential."""

    def get(self) -> str:
        """Return the current credential.

        Raises:
            CredentialError: If no credential can be obtained.
        """
        ...


class StaticCredentials:
    """Provider returning a fixed credential."""

    def __init__(self, value: str) -> None:
        self._value = value

    def get(self) -> str:
        return self._value


class ScrapingCredentialProvider:
    """Scrapes the credential from the game's front-end page.

    The value is cached and re-scraped once ``refresh_interval`` seconds have
    passed since the last successful fetch.

    Example:
        with httpx.Client() as http:
            credentials = ScrapingCredentialProvider(http)
            token = credentials.get()
    """

    def __init__(
        self,
        http_client: httpx.Client,
        url: str = DEFAULT_FRONTEND_URL,
        refresh_interval: float = 3600.0,
    ) -> None:
        self._http = http_client
        self.url = url
        self.refresh_interval = refresh_interval
        self._value: str | None = None
        self._fetched_at = 0.0

    def get(self) -> str:
        now = time.monotonic()
        if self._value is None or now - self._fetched_at >= self.refresh_interval:
            self._value = self.scrape()
            self._fetched_at = now
        return self._value

    def invalidate(self) -> None:
        """Force the next ``get`` to scrape again."""
        self._value = None

    def scrape(self) -> str:
        """Fetch the front-end page and extract the credential.

        Raises:
            CredentialError: If the page cannot be fetched or holds no credential.
        """
        logger.debug("Scraping API credential from %s", self.url)
        try:
            response = self._http.get(self.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise CredentialError(f"Could not fetch {self.url}: {e}") from e

        match = UID_PATTERN.search(response.text)
        if match is None or not match.group(1):
            raise CredentialError(f"No API credential found in {self.url}")

        logger.info("Obtained API credential from %s", self.url)
        return match.group(1)
