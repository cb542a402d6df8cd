"""
Fingerprint cache for row-level change detection.
"""

from .fingerprint import FINGERPRINT_SIZE, compute_fingerprint, parse_primary_key
from .fingerprint_cache import FingerprintCache, RECORD_SIZE

__all__ = [
    "FINGERPRINT_SIZE",
    "RECORD_SIZE",
    "compute_fingerprint",
    "parse_primary_key",
    "FingerprintCache",
]
