from __future__ import annotations

from auraconnect.auth.service import is_valid_email
from auraconnect.errors import ValidationError
from auraconnect.store import CredentialStore, normalize_email


MIN_MESSAGE_LENGTH = 10


def _debug(msg: str) -> None:
    print(f"[contact] {msg}")


def submit_contact_message(
    store: CredentialStore,
    *,
    name: str | None,
    email: str | None,
    message: str | None,
) -> None:
    """Validate and persist a contact-form message (trimmed, email normalized)."""
    clean_name = (name or "").strip()
    if len(clean_name) < 2:
        raise ValidationError("Please enter your name.")
    if not is_valid_email(email or ""):
        raise ValidationError("Please enter a valid email.")
    msg = (message or "").strip()
    if len(msg) < MIN_MESSAGE_LENGTH:
        raise ValidationError("Message must be at least 10 characters.")

    store.record_contact_message(name=clean_name, email=normalize_email(email or ""), message=msg)
    _debug(f"recorded message ({len(msg)} chars)")
