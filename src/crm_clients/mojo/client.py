"""Mojo CRM client with sync and async interfaces."""

from __future__ import annotations

import logging
import os

import httpx

from crm_clients.exceptions import MojoEncodingError, MojoError
from crm_clients.mojo.encoder import dumps, encode_contacts, encode_note
from crm_clients.mojo.models import Contact, CreatedContact
from crm_clients.mojo.response import check_note_response, parse_bulk_create_response
from crm_clients.mojo.transport import (
    DEFAULT_TIMEOUT,
    AsyncMojoTransport,
    MojoTransport,
)

logger = logging.getLogger(__name__)

BULK_CREATE_PATH = "/api/contacts/bulk_create/"
NOTES_PATH = "/api/notes/"


def _resolve_config(url: str | None, token: str | None) -> tuple[str, str]:
    url = url or os.environ.get("MOJO_URL")
    token = token or os.environ.get("MOJO_TOKEN")
    if not url:
        raise MojoError(
            "Mojo URL is required. "
            "Pass it directly or set MOJO_URL in your environment."
        )
    if not token:
        raise MojoError(
            "Mojo access token is required. "
            "Pass it directly or set MOJO_TOKEN in your environment."
        )
    return url, token


def _bulk_body(contacts: tuple[Contact, ...]) -> bytes:
    if not contacts:
        raise MojoEncodingError("at least one contact is required")
    return dumps(encode_contacts(contacts))


class MojoClient:
    """Client for a single Mojo account.

    Args:
        url: Account URL including protocol and host, e.g.
            ``https://posttest.mojosells.com``. Each Mojo customer has their own.
        token: Access token obtained by the customer through OAuth.
        http_client: Optional ``httpx.Client`` used for every request.
        timeout: Request timeout in seconds when no client is supplied.
    """

    def __init__(
        self,
        url: str | None = None,
        token: str | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        url, token = _resolve_config(url, token)
        self._transport = MojoTransport(url, token, http_client=http_client, timeout=timeout)

    @property
    def url(self) -> str:
        return self._transport.base_url

    def add_contact(self, *contacts: Contact) -> list[CreatedContact]:
        """Create one or more contacts in a single bulk request.

        Send every contact of a logical submission in one call: Mojo rejects
        a bulk request while the previous one is still running.

        Returns:
            The records Mojo reports as created.

        Raises:
            MojoEncodingError: a contact is missing ``id`` or ``group_id``.
            MojoDuplicateError: a contact with the same id already exists.
            MojoLockedError: the previous request has not finished.
            MojoInvalidError: Mojo reported a validation error.
            MojoForbiddenError: the token was refused.
            MojoDecodeError: the response was not valid JSON.
            MojoTransportError: network failure or unexpected status.
        """
        body = _bulk_body(contacts)
        created = parse_bulk_create_response(self._transport.post(BULK_CREATE_PATH, body))
        logger.info(
            f"Mojo at {self.url} created {len(created)} of {len(contacts)} submitted contacts"
        )
        return created

    def add_note(self, contact_id: str, contents: str) -> None:
        """Append a note to an existing contact."""
        body = dumps(encode_note(contact_id, contents))
        response = self._transport.post(NOTES_PATH, body)
        check_note_response(response, self._transport.url_for(NOTES_PATH), body)
        logger.info(f"Added note to contact {contact_id}")

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> MojoClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncMojoClient:
    """Async version of MojoClient."""

    def __init__(
        self,
        url: str | None = None,
        token: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        url, token = _resolve_config(url, token)
        self._transport = AsyncMojoTransport(
            url, token, http_client=http_client, timeout=timeout
        )

    @property
    def url(self) -> str:
        return self._transport.base_url

    async def add_contact(self, *contacts: Contact) -> list[CreatedContact]:
        """Async version of add_contact."""
        body = _bulk_body(contacts)
        response = await self._transport.post(BULK_CREATE_PATH, body)
        created = parse_bulk_create_response(response)
        logger.info(
            f"Mojo at {self.url} created {len(created)} of {len(contacts)} submitted contacts"
        )
        return created

    async def add_note(self, contact_id: str, contents: str) -> None:
        """Async version of add_note."""
        body = dumps(encode_note(contact_id, contents))
        response = await self._transport.post(NOTES_PATH, body)
        check_note_response(response, self._transport.url_for(NOTES_PATH), body)
        logger.info(f"Added note to contact {contact_id}")

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def __aenter__(self) -> AsyncMojoClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
