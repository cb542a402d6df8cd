"""
Revision log for tabular snapshots.

This package provides:
- FingerprintCache: Persistent primary key -> row digest map for change detection
- RevisionLog: Append-only CSV data file plus a revision index
- RevisionWriter: Scoped append session committing one revision
- RevisionExporter: Seek-based export of a single revision
- ChangeDetector / add / export: The ingestion driver and its entry points
"""

from .core import (
    Revision,
    UpdateType,
    LogPaths,
    IngestReport,
    RevlogError,
    DecodeError,
    SchemaError,
    RevisionNotFoundError,
)
from .cache import FingerprintCache, compute_fingerprint, parse_primary_key
from .log import RevisionLog, RevisionWriter, RevisionExporter, RevisionIndex
from .config import RevlogConfig
from .runner import ChangeDetector, add, export

__all__ = [
    "Revision",
    "UpdateType",
    "LogPaths",
    "IngestReport",
    "RevlogError",
    "DecodeError",
    "SchemaError",
    "RevisionNotFoundError",
    "FingerprintCache",
    "compute_fingerprint",
    "parse_primary_key",
    "RevisionLog",
    "RevisionWriter",
    "RevisionExporter",
    "RevisionIndex",
    "RevlogConfig",
    "ChangeDetector",
    "add",
    "export",
]

__version__ = "0.1.0"
