"""
Core models and exceptions for the revision log.
"""

from .models import Revision, UpdateType, LogPaths, IngestReport
from .exceptions import RevlogError, DecodeError, SchemaError, RevisionNotFoundError

__all__ = [
    "Revision",
    "UpdateType",
    "LogPaths",
    "IngestReport",
    "RevlogError",
    "DecodeError",
    "SchemaError",
    "RevisionNotFoundError",
]
