"""Data models for the Mojo module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# contactnote_set entries only ever use this type
NOTE_TYPE = 1

LOCKED_MESSAGE = "Previous request was not finished or was interrupted."


class MediaType(IntEnum):
    """Value of ``type`` in a mediainfo_set entry."""

    WORK = 1
    MOBILE = 2
    HOME = 3
    EMAIL = 4
    OTHER = 5


@dataclass(frozen=True)
class Contact:
    """A contact to be created in Mojo.

    ``id`` and ``group_id`` are required. ``id`` is chosen by the caller and
    is the key Mojo uses to detect duplicates. Either ``name`` or at least one
    of ``email``, ``mobile_phone``, ``work_phone``, ``home_phone`` should be
    provided, otherwise the created contact is empty.
    """

    id: str
    group_id: int
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    email: str = ""
    mobile_phone: str = ""
    work_phone: str = ""
    home_phone: str = ""
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class CreatedContact:
    """A record from the ``result`` list of a bulk create response."""

    api_contact_id: str
    contact_id: int | None = None
