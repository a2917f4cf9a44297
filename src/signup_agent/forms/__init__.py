"""Form field name handling."""

from signup_agent.forms.normalizer import (
    CANONICAL_FIELDS, FIELD_ALIASES, classify_field, normalize_field, resolve_field_value
)

__all__ = [
    "CANONICAL_FIELDS", "FIELD_ALIASES",
    "classify_field", "normalize_field", "resolve_field_value"
]
