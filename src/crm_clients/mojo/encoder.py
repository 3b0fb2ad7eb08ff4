"""Encode contacts and notes into Mojo's wire format."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from crm_clients.exceptions import MojoEncodingError
from crm_clients.mojo.models import NOTE_TYPE, Contact, MediaType

logger = logging.getLogger(__name__)

_PHONE_PUNCTUATION = str.maketrans("", "", "()- ")


def clean_phone(phone: str) -> str:
    """Strip parentheses, dashes and spaces from a phone number."""
    return phone.translate(_PHONE_PUNCTUATION)


def encode_contact(contact: Contact) -> dict[str, Any]:
    """Build the wire envelope for a single contact.

    Optional keys are only added when the source field is non-empty, so the
    envelope never carries empty strings or empty lists.

    Raises:
        MojoEncodingError: ``id`` or ``group_id`` is missing.
    """
    if not contact.id:
        raise MojoEncodingError("missing required field ID")
    if not contact.group_id:
        raise MojoEncodingError("missing required field GroupID")

    payload: dict[str, Any] = {
        "api_contact_id": contact.id,
        "full_name": contact.name,
        "contactgroup_set": [{"group_id": contact.group_id}],
    }
    if contact.address:
        payload["address"] = contact.address
    if contact.city:
        payload["city"] = contact.city
    if contact.state:
        payload["state"] = contact.state
    if contact.zip_code:
        payload["zip_code"] = contact.zip_code

    if contact.notes:
        payload["contactnote_set"] = [
            {"type": NOTE_TYPE, "contents": note} for note in contact.notes
        ]

    media = _media_set(contact)
    if media:
        payload["mediainfo_set"] = media

    return payload


def _media_set(contact: Contact) -> list[dict[str, Any]]:
    # Order is fixed by media type: work, mobile, home, email
    media = []
    if contact.work_phone:
        media.append({"type": int(MediaType.WORK), "value": clean_phone(contact.work_phone)})
    if contact.mobile_phone:
        media.append({"type": int(MediaType.MOBILE), "value": clean_phone(contact.mobile_phone)})
    if contact.home_phone:
        media.append({"type": int(MediaType.HOME), "value": clean_phone(contact.home_phone)})
    if contact.email:
        media.append({"type": int(MediaType.EMAIL), "value": contact.email})
    return media


def encode_contacts(contacts: Iterable[Contact]) -> list[dict[str, Any]]:
    """Encode contacts for the bulk create endpoint, keeping caller order."""
    encoded = [encode_contact(contact) for contact in contacts]
    logger.debug(f"Encoded {len(encoded)} contacts for bulk create")
    return encoded


def encode_note(contact_id: str, contents: str) -> dict[str, Any]:
    """Build the body for the notes endpoint."""
    return {"api_contact_id": contact_id, "contents": contents, "type": NOTE_TYPE}


def dumps(payload: Any) -> bytes:
    """Serialize a payload to the compact JSON bytes sent on the wire."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
