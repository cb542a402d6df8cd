"""
Persistent primary-key -> fingerprint cache.

The cache lets change detection run in O(rows) without re-reading the data
file. It persists as a flat sequence of fixed-width records:

    [8-byte little-endian primary key][FINGERPRINT_SIZE-byte digest]

There is no header and no length prefix; the entry count is derived from the
file size.
"""

import logging
import struct
from pathlib import Path
from typing import Dict, Iterator, Optional, Sequence, Tuple

from ..core.exceptions import DecodeError
from ..core.models import UpdateType
from .fingerprint import FINGERPRINT_SIZE, Field, compute_fingerprint

logger = logging.getLogger(__name__)

_KEY_STRUCT = struct.Struct("<Q")
RECORD_SIZE = _KEY_STRUCT.size + FINGERPRINT_SIZE


class FingerprintCache:
    """
    In-memory map of primary key to the latest fingerprint seen.
    
    Keys missing from a newer dataset are never visited, so their entries
    simply go stale; removals are not tracked.
    """

    def __init__(self):
        self._entries: Dict[int, bytes] = {}

    def update(self, primary_key: int, fields: Sequence[Field]) -> Optional[UpdateType]:
        """
        Classify a row and record its fingerprint.
        
        Args:
            primary_key: Parsed primary key of the row
            fields: All field values, primary key included, in column order
            
        Returns:
            UpdateType.ADDED for an unseen key, UpdateType.CHANGED when the
            digest differs from the stored one, None when unchanged
        """
        fingerprint = compute_fingerprint(fields)
        existing = self._entries.get(primary_key)
        
        if existing is None:
            result = UpdateType.ADDED
        elif existing != fingerprint:
            result = UpdateType.CHANGED
        else:
            return None
        
        self._entries[primary_key] = fingerprint
        return result

    def get(self, primary_key: int) -> Optional[bytes]:
        """Get the stored fingerprint for a key."""
        return self._entries.get(primary_key)

    def items(self) -> Iterator[Tuple[int, bytes]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, primary_key: object) -> bool:
        return primary_key in self._entries

    def serialize(self, path: Path) -> None:
        """
        Write every entry to a new file, replacing any existing one.
        
        Record order follows dict iteration and carries no meaning.
        """
        path = Path(path)
        logger.info(f"Saving fingerprint cache with {len(self._entries):,} entries to {path}")
        
        with open(path, "wb") as f:
            for key, fingerprint in self._entries.items():
                f.write(_KEY_STRUCT.pack(key))
                f.write(fingerprint)

    def deserialize(self, path: Path) -> None:
        """
        Load entries from a cache file into this cache.
        
        Raises:
            DecodeError: If the file is not a whole number of records
        """
        path = Path(path)
        total_bytes = path.stat().st_size
        if total_bytes % RECORD_SIZE != 0:
            raise DecodeError(
                f"Cache file {path} has {total_bytes} bytes, "
                f"not a multiple of the {RECORD_SIZE}-byte record size"
            )
        
        total_entries = total_bytes // RECORD_SIZE
        logger.info(f"Loading fingerprint cache with {total_entries:,} entries from {path}")
        
        with open(path, "rb") as f:
            for record_num in range(total_entries):
                record = f.read(RECORD_SIZE)
                if len(record) != RECORD_SIZE:
                    raise DecodeError(
                        f"Truncated cache record {record_num} in {path}",
                        line_number=record_num,
                    )
                (key,) = _KEY_STRUCT.unpack_from(record)
                self._entries[key] = record[_KEY_STRUCT.size:]

    def load_if_exists(self, path: Path) -> bool:
        """
        Deserialize from path when the file exists.
        
        Returns:
            True if a cache file was loaded
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"Cache file does not exist: {path}")
            return False
        self.deserialize(path)
        return True
