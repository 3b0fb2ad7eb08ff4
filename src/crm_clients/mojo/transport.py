"""HTTP transport for the Mojo API with sync and async interfaces."""

from __future__ import annotations

import logging

import httpx

from crm_clients.exceptions import (
    MojoForbiddenError,
    MojoInvalidError,
    MojoTransportError,
)
from crm_clients.mojo.response import forbidden_message

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0


def prefix_http(url: str) -> str:
    """Assume https:// when the configured URL has no scheme."""
    if not (url.startswith("http://") or url.startswith("https://")):
        url = "https://" + url
    return url.rstrip("/")


def _text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def _check_status(response: httpx.Response, url: str, request_body: bytes) -> bytes:
    """Map the status code to an exception, or return the body of a 200."""
    body = response.content
    status = response.status_code

    if status == 403:
        msg = forbidden_message(body)
        logger.warning(f"Mojo refused access to {url}: {msg}")
        raise MojoForbiddenError(msg)
    if status == 400:
        text = _text(body)
        logger.warning(f"Mojo rejected request to {url}: {text}")
        raise MojoInvalidError(
            f"bad request to {url} with body {text}",
            url=url,
            request_body=_text(request_body),
            response_body=text,
        )
    if status != 200:
        text = _text(body)
        logger.error(f"Unexpected status {status} from {url}")
        raise MojoTransportError(
            f"mojo: invalid status code {status} with body {text}",
            url=url,
            status_code=status,
            body=text,
        )
    return body


class _BaseTransport:
    def __init__(self, base_url: str, token: str):
        self.base_url = prefix_http(base_url)
        try:
            httpx.URL(self.base_url)
        except httpx.InvalidURL as e:
            raise MojoTransportError(
                f"mojo: building request for {self.base_url} ({e})", url=self.base_url
            ) from e
        self._token = token

    def url_for(self, path: str) -> str:
        return self.base_url + path

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token}",
        }


class MojoTransport(_BaseTransport):
    """POST JSON bodies to a Mojo account with bearer authentication.

    Args:
        base_url: Account URL, e.g. ``https://posttest.mojosells.com``.
        token: OAuth access token.
        http_client: Optional preconfigured ``httpx.Client``. It is used as-is
            and left open by ``close()``.
        timeout: Request timeout in seconds for the default client.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(base_url, token)
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=timeout)
        self._client = http_client

    def post(self, path: str, body: bytes) -> bytes:
        """Send ``body`` to ``path`` and return the body of a 200 response."""
        url = self.url_for(path)
        logger.debug(f"POST {url} ({len(body)} bytes)")
        try:
            response = self._client.post(url, content=body, headers=self._headers())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request to {url} failed: {e}")
            raise MojoTransportError(
                f"mojo: making request to {url} ({e})", url=url
            ) from e
        return _check_status(response, url, body)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> MojoTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncMojoTransport(_BaseTransport):
    """Async version of MojoTransport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        token: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(base_url, token)
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(timeout=timeout)
        self._client = http_client

    async def post(self, path: str, body: bytes) -> bytes:
        """Async version of MojoTransport.post."""
        url = self.url_for(path)
        logger.debug(f"POST {url} ({len(body)} bytes)")
        try:
            response = await self._client.post(
                url, content=body, headers=self._headers()
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request to {url} failed: {e}")
            raise MojoTransportError(
                f"mojo: making request to {url} ({e})", url=url
            ) from e
        return _check_status(response, url, body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncMojoTransport:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
