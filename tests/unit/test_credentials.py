"""Unit tests for credential providers."""

from unittest.mock import patch

import httpx
import pytest

from akiclient.credentials import (
    DEFAULT_FRONTEND_URL,
    CredentialProvider,
    ScrapingCredentialProvider,
    StaticCredentials,
)
from akiclient.exceptions import CredentialError

GAME_PAGE = """
<html><script>
  var uid_ext_session = 'a1b2c3-d4e5';
  var frontaddr = 'xyz';
</script></html>
"""


def page_client(*responses: httpx.Response) -> tuple[httpx.Client, list[str]]:
    """Client serving the given responses in order, recording requested URLs."""
    requested: list[str] = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return queue.pop(0) if len(queue) > 1 else queue[0]

    return httpx.Client(transport=httpx.MockTransport(handler)), requested


class TestStaticCredentials:
    def test_returns_value(self) -> None:
        credentials = StaticCredentials("token")
        assert credentials.get() == "token"
        assert isinstance(credentials, CredentialProvider)


class TestScrapingCredentialProvider:
    """Tests for ScrapingCredentialProvider."""

    def test_scrapes_front_end_page(self) -> None:
        client, requested = page_client(httpx.Response(200, text=GAME_PAGE))
        with client:
            provider = ScrapingCredentialProvider(client)
            assert provider.get() == "a1b2c3-d4e5"
        assert requested == [DEFAULT_FRONTEND_URL]

    def test_value_is_cached(self) -> None:
        client, requested = page_client(httpx.Response(200, text=GAME_PAGE))
        with client:
            provider = ScrapingCredentialProvider(client)
            provider.get()
            provider.get()
        assert len(requested) == 1

    def test_invalidate_forces_scrape(self) -> None:
        client, requested = page_client(
            httpx.Response(200, text=GAME_PAGE),
            httpx.Response(200, text=GAME_PAGE.replace("a1b2c3-d4e5", "fresh")),
        )
        with client:
            provider = ScrapingCredentialProvider(client)
            assert provider.get() == "a1b2c3-d4e5"
            provider.invalidate()
            assert provider.get() == "fresh"
        assert len(requested) == 2

    def test_refresh_after_interval(self) -> None:
        client, requested = page_client(httpx.Response(200, text=GAME_PAGE))
        with client:
            provider = ScrapingCredentialProvider(client, refresh_interval=60.0)
            with patch("akiclient.credentials.time.monotonic", return_value=1000.0):
                provider.get()
            with patch("akiclient.credentials.time.monotonic", return_value=1030.0):
                provider.get()
            assert len(requested) == 1
            with patch("akiclient.credentials.time.monotonic", return_value=1061.0):
                provider.get()
        assert len(requested) == 2

    def test_custom_url(self) -> None:
        client, requested = page_client(httpx.Response(200, text=GAME_PAGE))
        with client:
            ScrapingCredentialProvider(client, url="https://fr.example/game").get()
        assert requested == ["https://fr.example/game"]

    def test_missing_token(self) -> None:
        client, _ = page_client(httpx.Response(200, text="<html></html>"))
        with client:
            provider = ScrapingCredentialProvider(client)
            with pytest.raises(CredentialError, match="No API credential"):
                provider.get()

    def test_empty_token(self) -> None:
        client, _ = page_client(
            httpx.Response(200, text="var uid_ext_session = '';")
        )
        with client:
            with pytest.raises(CredentialError):
                ScrapingCredentialProvider(client).get()

    def test_http_error(self) -> None:
        client, _ = page_client(httpx.Response(503, text="unavailable"))
        with client:
            with pytest.raises(CredentialError, match="Could not fetch"):
                ScrapingCredentialProvider(client).get()

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(CredentialError) as exc_info:
                ScrapingCredentialProvider(client).get()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_failed_scrape_is_not_cached(self) -> None:
        client, requested = page_client(
            httpx.Response(503),
            httpx.Response(200, text=GAME_PAGE),
        )
        with client:
            provider = ScrapingCredentialProvider(client)
            with pytest.raises(CredentialError):
                provider.get()
            assert provider.get() == "a1b2c3-d4e5"
        assert len(requested) == 2
