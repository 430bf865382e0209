import logging
from typing import Sequence

from .errors import (
    DuplicateName,
    EmptyName,
    MissingCredentials,
    NameTooLong,
    PasswordMismatch,
    PasswordTooShort,
)
from .models import Flavor


logger = logging.getLogger(__name__)

MAX_FLAVOR_NAME_LENGTH = 45
MIN_PASSWORD_LENGTH = 8


def normalize_flavor_name(name: str) -> str:
    return name.strip().casefold()


def validate_flavor_name(candidate: str, snapshot: Sequence[Flavor]) -> str:
    """Return the canonical (trimmed) name, or raise the first ValidationError found.

    Checks run in order: empty, too long, duplicate (case-insensitive against
    every name in ``snapshot``). Pass the live snapshot, not a cached copy.
    """
    trimmed = candidate.strip()
    if not trimmed:
        raise EmptyName()

    if len(trimmed) > MAX_FLAVOR_NAME_LENGTH:
        raise NameTooLong(MAX_FLAVOR_NAME_LENGTH)

    normalized = trimmed.casefold()
    if any(normalize_flavor_name(flavor.name) == normalized for flavor in snapshot):
        raise DuplicateName(trimmed)

    return trimmed


def validate_sign_in(email: str, password: str) -> str:
    """Local sign-in gate. Returns the identity (trimmed email); no credential is verified."""
    identity = (email or "").strip()
    if not identity or not password:
        raise MissingCredentials()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordTooShort(MIN_PASSWORD_LENGTH)
    return identity


def validate_sign_up(email: str, password: str, confirm_password: str) -> str:
    identity = (email or "").strip()
    if not identity or not password or not confirm_password:
        raise MissingCredentials("Please fill in all fields")
    if password != confirm_password:
        raise PasswordMismatch()
    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordTooShort(MIN_PASSWORD_LENGTH)
    return identity
