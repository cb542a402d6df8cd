"""
Revision-indexed append-only log.
"""

from .index import RevisionIndex, INDEX_HEADERS
from .revision_log import RevisionLog, RevisionWriter
from .exporter import RevisionExporter

__all__ = [
    "RevisionIndex",
    "INDEX_HEADERS",
    "RevisionLog",
    "RevisionWriter",
    "RevisionExporter",
]
