"""
Privilege Sanitizer
===================

Validates privilege input against the supported vocabulary before it
reaches a GRANT statement, and parses the grant strings reported by
``SHOW GRANTS`` back into privilege tokens.

Both directions are lenient: unknown tokens are dropped rather than
raising, and callers decide whether an empty result is an error.
"""

import re
from typing import Iterable, Union

from app.models.role_enum import VALID_PRIVILEGES

_GRANT_CLAUSE = re.compile(r"GRANT\s+(.+?)\s+ON\b")


def sanitize_privileges(value: Union[str, Iterable[str]]) -> list[str]:
    """
    Normalize privilege input to supported tokens.

    Args:
        value: Comma-separated string ("select, insert") or a sequence
            of privilege names

    Returns:
        Uppercased tokens in first-seen order, duplicates and unknown
        tokens removed. May be empty.
    """
    if isinstance(value, str):
        candidates = value.split(",")
    else:
        candidates = [item for item in value if isinstance(item, str)]

    result: list[str] = []
    for candidate in candidates:
        token = " ".join(candidate.split()).upper()
        if token in VALID_PRIVILEGES and token not in result:
            result.append(token)
    return result


def parse_grant(grant: str) -> set[str]:
    """
    Extract the privilege tokens of a single grant string.

    ``GRANT SELECT, SHOW VIEW ON `shop`.* TO `bob`@`localhost``` yields
    ``{"SELECT", "SHOW VIEW"}``. Text that is not a privilege grant, such
    as ``GRANT USAGE ...`` or a role grant, contributes nothing.
    """
    if not isinstance(grant, str):
        return set()
    match = _GRANT_CLAUSE.search(grant)
    if not match:
        return set()
    return set(sanitize_privileges(match.group(1)))


def extract_privileges(grants: Iterable[str]) -> set[str]:
    """Union of the privilege tokens across all grant strings of a user."""
    privileges: set[str] = set()
    for grant in grants:
        privileges |= parse_grant(grant)
    return privileges
