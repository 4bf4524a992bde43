"""
Syntactic checks used to classify lookup identifiers.
"""

import re

from ..errors import InvalidFormatError

ASN_PATTERN = re.compile(r"^(?:AS)?([0-9]{1,10})$", re.IGNORECASE)
ENTITY_HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9_]+(?:-[A-Za-z0-9_]+)+$")

MAX_ASN = 0xFFFFFFFF


def is_asn(value: str) -> bool:
    """Check for an ASN literal: ``AS15169``, ``as15169`` or bare digits."""
    match = ASN_PATTERN.match(value.strip())
    return bool(match) and int(match.group(1)) <= MAX_ASN


def parse_asn(value: str) -> int:
    """Return the numeric ASN from an ASN literal."""
    match = ASN_PATTERN.match(value.strip())
    if not match:
        raise InvalidFormatError(f"Invalid AS number: {value!r}")
    asn = int(match.group(1))
    if asn > MAX_ASN:
        raise InvalidFormatError(f"AS number out of range: {value!r}")
    return asn


def is_entity_handle(value: str) -> bool:
    """
    Check whether a string resembles an object handle such as ``ABC123-ARIN``.

    Handles contain no dots or colons and consist of alphanumeric words
    joined by hyphens.
    """
    return bool(ENTITY_HANDLE_PATTERN.match(value.strip()))


def domain_labels(value: str) -> tuple[str, ...]:
    """Split a domain into lowercase labels, ignoring a trailing root dot."""
    text = value.strip().rstrip(".").lower()
    if not text:
        return ()
    return tuple(text.split("."))
