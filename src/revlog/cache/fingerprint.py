"""
Row fingerprinting and primary-key parsing.

A fingerprint is a 20-byte BLAKE2b digest (id-blake2b160, RFC 7693) fed with
every field of a row in column order. Field values are fed back to back with
no separator, so two rows hash equal exactly when the concatenation of their
field bytes is equal.
"""

import hashlib
from typing import Sequence, Union

from ..core.exceptions import DecodeError

FINGERPRINT_SIZE = 20
MAX_PRIMARY_KEY = 2 ** 64 - 1

Field = Union[str, bytes]


def _field_bytes(value: Field) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def compute_fingerprint(fields: Sequence[Field]) -> bytes:
    """
    Compute the fingerprint of a row.
    
    Args:
        fields: All field values of the row, primary key included
        
    Returns:
        Raw digest bytes (FINGERPRINT_SIZE long)
    """
    hasher = hashlib.blake2b(digest_size=FINGERPRINT_SIZE)
    for value in fields:
        hasher.update(_field_bytes(value))
    return hasher.digest()


def parse_primary_key(value: Field) -> int:
    """
    Parse a primary-key field as an unsigned 64-bit integer.
    
    ASCII decimal digits with an optional leading "+" are accepted;
    whitespace, "-" and underscores are rejected.
    
    Raises:
        DecodeError: If the value is not a u64
    """
    text = value.decode("ascii", errors="replace") if isinstance(value, bytes) else value
    digits = text[1:] if text.startswith("+") else text
    if not digits or not digits.isascii() or not digits.isdigit():
        raise DecodeError(f"Primary key is not an unsigned integer: {text!r}")
    key = int(digits)
    if key > MAX_PRIMARY_KEY:
        raise DecodeError(f"Primary key out of u64 range: {text}")
    return key
