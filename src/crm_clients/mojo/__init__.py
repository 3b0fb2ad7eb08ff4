"""Mojo CRM contact ingestion client."""

from crm_clients.mojo.client import AsyncMojoClient, MojoClient
from crm_clients.mojo.encoder import clean_phone, encode_contact, encode_contacts
from crm_clients.mojo.models import Contact, CreatedContact, MediaType

__all__ = [
    "MojoClient",
    "AsyncMojoClient",
    "Contact",
    "CreatedContact",
    "MediaType",
    "clean_phone",
    "encode_contact",
    "encode_contacts",
]
