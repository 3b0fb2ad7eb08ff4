"""Unified exception hierarchy for crm-clients."""

from __future__ import annotations


class CRMClientError(Exception):
    """Base exception for all crm-client errors."""


# Mojo
class MojoError(CRMClientError):
    """Base exception for Mojo operations.

    Raised directly for operational failures that carry no structured payload.
    """


class MojoEncodingError(MojoError):
    """A contact could not be encoded, e.g. a required field is missing."""


class MojoTransportError(MojoError):
    """The request failed on the network or returned an unexpected status."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ):
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class MojoForbiddenError(MojoError):
    """Status 403, usually an invalid access token."""

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(f"mojo: {msg}")


class MojoDuplicateError(MojoError):
    """One or more contacts with the same api_contact_id already exist."""

    def __init__(self, ids: list[str]):
        self.ids = list(ids)
        super().__init__(f"mojo: contacts already exist {','.join(self.ids)}")


class MojoInvalidError(MojoError):
    """Mojo rejected the request as invalid.

    ``url``, ``request_body`` and ``response_body`` are set when the error came
    from a request whose context is useful for diagnostics.
    """

    def __init__(
        self,
        msg: str,
        url: str | None = None,
        request_body: str | None = None,
        response_body: str | None = None,
    ):
        self.msg = msg
        self.url = url
        self.request_body = request_body
        self.response_body = response_body
        super().__init__(f"mojo: {msg}")


class MojoDecodeError(MojoError):
    """The response body is not the JSON object Mojo should have sent."""


class MojoLockedError(MojoError):
    """A previous bulk request for the account has not finished yet."""
