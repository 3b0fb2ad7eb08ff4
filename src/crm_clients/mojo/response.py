"""Classify Mojo response bodies into typed outcomes.

Mojo answers bulk creates with status 200 whether the request succeeded,
hit duplicates, failed validation or collided with a previous request that is
still running. Only the combination of ``errors`` and
``duplicated_api_contact_id`` tells them apart, so the rules below are
evaluated in order and the first match wins.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from crm_clients.exceptions import (
    MojoDecodeError,
    MojoDuplicateError,
    MojoInvalidError,
    MojoLockedError,
)
from crm_clients.mojo.models import LOCKED_MESSAGE, CreatedContact

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    SUCCESS = "success"
    LOCKED = "locked"
    DUPLICATE = "duplicate"
    INVALID = "invalid"


def _decode_failure(reason: str) -> MojoDecodeError:
    return MojoDecodeError(f"mojo: decoding response body ({reason})")


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _decode_failure(f"{key} must be a list of strings")
    return value


def _created_list(data: dict[str, Any]) -> list[CreatedContact]:
    value = data.get("result")
    if value is None:
        return []
    if not isinstance(value, list):
        raise _decode_failure("result must be a list")
    created = []
    for item in value:
        if not isinstance(item, dict):
            raise _decode_failure("result entries must be objects")
        api_contact_id = item.get("api_contact_id", "")
        contact_id = item.get("contact_id")
        if not isinstance(api_contact_id, str):
            raise _decode_failure("api_contact_id must be a string")
        # bool is an int subclass but never a valid id
        if contact_id is not None and (
            isinstance(contact_id, bool) or not isinstance(contact_id, int)
        ):
            raise _decode_failure("contact_id must be an integer")
        created.append(CreatedContact(api_contact_id=api_contact_id, contact_id=contact_id))
    return created


@dataclass
class BulkCreateResponse:
    """Parsed body of ``/api/contacts/bulk_create/``.

    ``from_dict`` raises MojoDecodeError when a field has the wrong shape.
    """

    errors: list[str] = field(default_factory=list)
    duplicated_api_contact_id: list[str] = field(default_factory=list)
    result: list[CreatedContact] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BulkCreateResponse:
        return cls(
            errors=_string_list(data, "errors"),
            duplicated_api_contact_id=_string_list(data, "duplicated_api_contact_id"),
            result=_created_list(data),
        )

    @property
    def error_message(self) -> str:
        return " ".join(self.errors)

    def created(self) -> list[CreatedContact]:
        return list(self.result)


@dataclass(frozen=True)
class Classification:
    """Tagged result of classifying a bulk create response."""

    outcome: Outcome
    message: str = ""
    duplicated_ids: list[str] = field(default_factory=list)
    created: list[CreatedContact] = field(default_factory=list)


def _is_locked(response: BulkCreateResponse) -> bool:
    return response.errors == [LOCKED_MESSAGE]


def _is_duplicate(response: BulkCreateResponse) -> bool:
    return bool(response.errors) and bool(response.duplicated_api_contact_id)


def _is_error(response: BulkCreateResponse) -> bool:
    return bool(response.errors)


_RULES: tuple[tuple[Outcome, Callable[[BulkCreateResponse], bool]], ...] = (
    (Outcome.LOCKED, _is_locked),
    (Outcome.DUPLICATE, _is_duplicate),
    (Outcome.INVALID, _is_error),
)


def classify(response: BulkCreateResponse) -> Classification:
    """Pick the outcome of a bulk create response."""
    for outcome, matches in _RULES:
        if not matches(response):
            continue
        if outcome is Outcome.DUPLICATE:
            return Classification(
                outcome,
                message=response.error_message,
                duplicated_ids=list(response.duplicated_api_contact_id),
            )
        return Classification(outcome, message=response.error_message)
    return Classification(Outcome.SUCCESS, created=response.created())


def raise_for_classification(classification: Classification) -> list[CreatedContact]:
    """Raise the exception matching a failed outcome, or return created records."""
    outcome = classification.outcome
    if outcome is Outcome.LOCKED:
        raise MojoLockedError(f"mojo: {classification.message}")
    if outcome is Outcome.DUPLICATE:
        raise MojoDuplicateError(classification.duplicated_ids)
    if outcome is Outcome.INVALID:
        raise MojoInvalidError(classification.message)
    return classification.created


def decode_body(body: bytes) -> dict[str, Any]:
    """Parse a response body that must be a JSON object."""
    try:
        data = json.loads(body)
    except ValueError as e:
        raise _decode_failure(str(e)) from e
    if not isinstance(data, dict):
        raise _decode_failure(f"expected a JSON object, got {type(data).__name__}")
    return data


def parse_bulk_create_response(body: bytes) -> list[CreatedContact]:
    """Decode and classify a status 200 bulk create body.

    Raises:
        MojoDecodeError: body is not a JSON object or a field has the wrong type.
        MojoLockedError: a previous request is still running.
        MojoDuplicateError: some contacts already exist.
        MojoInvalidError: Mojo reported validation errors.
    """
    response = BulkCreateResponse.from_dict(decode_body(body))
    classification = classify(response)
    if classification.outcome is not Outcome.SUCCESS:
        logger.warning(
            f"Bulk create returned {classification.outcome.value}: {classification.message}"
        )
    return raise_for_classification(classification)


def forbidden_message(body: bytes) -> str:
    """Message for a 403 response: ``detail`` when present, else the raw body."""
    text = body.decode("utf-8", errors="replace")
    try:
        data = json.loads(body)
    except ValueError:
        return text
    if isinstance(data, dict):
        detail = data.get("detail")
        if isinstance(detail, str) and detail:
            return detail
    return text


def check_note_response(body: bytes, url: str, request_body: bytes) -> None:
    """Raise MojoInvalidError if the notes endpoint reported non_field_errors."""
    data = decode_body(body)
    errors = _string_list(data, "non_field_errors")
    if errors:
        raise MojoInvalidError(
            " ".join(errors),
            url=url,
            request_body=request_body.decode("utf-8", errors="replace"),
            response_body=body.decode("utf-8", errors="replace"),
        )
