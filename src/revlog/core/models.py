"""
Core data models for the revision log.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class UpdateType(str, Enum):
    """Classification of a row against the fingerprint cache."""
    ADDED = "added"
    CHANGED = "changed"

    def as_str(self) -> str:
        """One-letter code used in compact change listings."""
        return "A" if self is UpdateType.ADDED else "C"


@dataclass(frozen=True)
class Revision:
    """
    A committed slice of the data file.
    
    Attributes:
        id: Dense revision id, starting at 1
        byte_offset: Data file length before this revision was appended
        rows: Number of rows belonging to the revision (always >= 1)
    """
    id: int
    byte_offset: int
    rows: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "id": self.id,
            "byte_offset": self.byte_offset,
            "rows": self.rows,
        }


@dataclass(frozen=True)
class LogPaths:
    """Artifact paths sharing one basename."""
    basename: str
    data_path: Path
    index_path: Path
    cache_path: Path

    @classmethod
    def from_basename(
        cls,
        basename: Union[str, Path],
        data_suffix: str = ".csv",
        index_suffix: str = ".revisions.csv",
        cache_suffix: str = ".pkmap.dat",
    ) -> "LogPaths":
        """Derive the data, index and cache paths for a basename."""
        basename = str(basename)
        return cls(
            basename=basename,
            data_path=Path(f"{basename}{data_suffix}"),
            index_path=Path(f"{basename}{index_suffix}"),
            cache_path=Path(f"{basename}{cache_suffix}"),
        )


@dataclass
class IngestReport:
    """Report of a single add run."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    rows_processed: int = 0
    additions: int = 0
    updates: int = 0
    revision: Optional[Revision] = None

    @property
    def has_changes(self) -> bool:
        return self.revision is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "rows_processed": self.rows_processed,
            "additions": self.additions,
            "updates": self.updates,
            "revision": self.revision.to_dict() if self.revision else None,
        }

    def summary(self) -> str:
        """Get a human-readable summary."""
        if self.revision is None:
            return f"Processed {self.rows_processed:,} rows: no changes"
        lines = [
            f"Revision {self.revision.id}",
            f"  Rows processed: {self.rows_processed:,}",
            f"  Additions: {self.additions:,}",
            f"  Updates: {self.updates:,}",
        ]
        if self.completed_at:
            duration = (self.completed_at - self.started_at).total_seconds()
            lines.append(f"  Duration: {duration:.1f}s")
        return "\n".join(lines)
