"""
Identifier normalization for table and column names
"""
import re

_WHITESPACE = re.compile(r"\s+")
_INVALID = re.compile(r"[^a-z0-9_]")


def normalize_identifier(name: str) -> str:
    """
    Convert a human entered name into a storage safe identifier

    Lower-cases, collapses whitespace runs into one underscore and drops
    every character outside [a-z0-9_]. "Full Name" -> "full_name".

    Returns an empty string when nothing survives; callers treat that as
    a blank required field.
    """
    if not name:
        return ""
    lowered = _WHITESPACE.sub("_", name.lower())
    return _INVALID.sub("", lowered)
