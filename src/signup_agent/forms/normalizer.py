"""Mapping of arbitrary form field names onto canonical signup keys.

``normalize_field`` is an exact, case-insensitive table lookup. When the
synthetic data has nothing under either the raw or the normalized key,
``classify_field`` applies a lossy heuristic that guesses the field from its
raw text. The heuristic is best-effort and may pick the wrong key.
"""

import re
from typing import Dict, Mapping, Optional, Tuple

FIRST_NAME = "firstName"
LAST_NAME = "lastName"
EMAIL = "email"
PASSWORD = "password"
CONFIRM_PASSWORD = "confirmPassword"

CANONICAL_FIELDS = (FIRST_NAME, LAST_NAME, EMAIL, PASSWORD, CONFIRM_PASSWORD)

FIELD_ALIASES: Dict[str, str] = {
    "name": FIRST_NAME,
    "firstname": FIRST_NAME,
    "first_name": FIRST_NAME,

    "lastname": LAST_NAME,
    "last_name": LAST_NAME,

    "mail": EMAIL,
    "email": EMAIL,
    "username": EMAIL,

    "pass": PASSWORD,
    "password": PASSWORD,

    "confirmpassword": CONFIRM_PASSWORD,
    "confirm_password": CONFIRM_PASSWORD,
}

_PASSWORD_PATTERN = re.compile(r"pass", re.IGNORECASE)
_NAME_PATTERN = re.compile(r"john|test|name", re.IGNORECASE)


def normalize_field(field: str) -> str:
    """Return the canonical key for ``field``, or ``field`` unchanged if unmapped."""
    return FIELD_ALIASES.get(field.lower(), field)


def classify_field(raw: str) -> Optional[str]:
    """Guess a canonical key from raw field text; None means skip the field."""
    if "@" in raw:
        return EMAIL
    if _PASSWORD_PATTERN.search(raw):
        return CONFIRM_PASSWORD if "confirm" in raw.lower() else PASSWORD
    if _NAME_PATTERN.search(raw):
        return FIRST_NAME
    return None


def resolve_field_value(field: str, data: Mapping[str, str]) -> Optional[Tuple[str, str]]:
    """
    Find the value to type for ``field``.

    Lookup order is the raw field name, its normalized key, then the
    heuristic classification. Empty values count as missing.

    Returns:
        ``(key, value)`` for the key that matched, or None when nothing did
    """
    candidates = [field, normalize_field(field)]
    guessed = classify_field(field)
    if guessed:
        candidates.append(guessed)

    for key in candidates:
        value = data.get(key)
        if value:
            return key, value
    return None
