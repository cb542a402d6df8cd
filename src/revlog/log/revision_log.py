"""
Append-only revision log.

A log is two files sharing a basename:

    {basename}.csv            header line, then every appended row
    {basename}.revisions.csv  one (id, byte_offset, rows) record per revision

Rows are appended through a RevisionWriter session; a revision only becomes
visible once the session commits it to the index.

If a process dies after appending rows but before the index commit, those
bytes stay in the data file with no index record (an orphan tail). The next
revision starts at the current file length, so orphan rows are never
exported. Enabling fsync narrows this window but does not close it.
"""

import csv
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from ..core.exceptions import RevlogError
from ..core.models import LogPaths, Revision
from .exporter import RevisionExporter, read_data_headers
from .index import RevisionIndex

logger = logging.getLogger(__name__)


def _as_text(value, encoding: str) -> str:
    if isinstance(value, bytes):
        return value.decode(encoding)
    return value


class RevisionWriter:
    """
    Scoped append session for a single revision attempt.
    
    Usage:
        with log.create_revision(headers) as writer:
            for row in changed_rows:
                writer.write(row)
            revision = writer.complete()
    
    Leaving the with-block closes the data file on every path. A session
    that exits without complete() commits nothing.
    """

    def __init__(
        self,
        data_path: Path,
        index: RevisionIndex,
        encoding: str = "utf-8",
        fsync: bool = False,
    ):
        """
        Open the data file for append and capture the revision start offset.
        
        Args:
            data_path: Path to the data file (must already exist)
            index: Index that receives the commit
            encoding: Text encoding of the data file
            fsync: Whether to fsync the data file before committing
        """
        self.data_path = Path(data_path)
        self.index = index
        self.encoding = encoding
        self.fsync = fsync
        
        self._byte_offset = self.data_path.stat().st_size
        self._rows_written = 0
        self._completed = False
        self._file: Optional[TextIO] = open(
            self.data_path, "a", encoding=encoding, newline=""
        )
        self._writer = csv.writer(self._file, lineterminator="\n")
        
        logger.debug(f"Opened revision session on {self.data_path} at byte {self._byte_offset:,}")

    @property
    def byte_offset(self) -> int:
        return self._byte_offset

    @property
    def rows_written(self) -> int:
        return self._rows_written

    @property
    def completed(self) -> bool:
        return self._completed

    def write(self, row: Sequence) -> None:
        """Append one row to the data file."""
        if self._completed or self._file is None:
            raise RevlogError("Cannot write to a completed revision session")
        
        self._writer.writerow([_as_text(value, self.encoding) for value in row])
        self._rows_written += 1

    def complete(self) -> Optional[Revision]:
        """
        Finish the session.
        
        Returns:
            The committed Revision, or None if no rows were written (in which
            case the index is left untouched)
        """
        if self._completed:
            raise RevlogError("Revision session already completed")
        self._completed = True
        
        try:
            if self._rows_written == 0:
                logger.debug("No rows written; discarding revision session")
                return None
            
            self._file.flush()
            if self.fsync:
                os.fsync(self._file.fileno())
        finally:
            self.close()
        
        return self.index.append(self._byte_offset, self._rows_written)

    def close(self) -> None:
        """Release the data file handle."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "RevisionWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None and not self._completed and self._rows_written:
            logger.warning(
                f"Revision session aborted after {self._rows_written:,} rows; "
                f"bytes from offset {self._byte_offset:,} are not indexed"
            )
        self.close()


class RevisionLog:
    """
    Owner of the data and index files for one basename.
    """

    def __init__(self, paths: LogPaths, encoding: str = "utf-8", fsync: bool = False):
        """
        Initialize the revision log.
        
        Args:
            paths: Artifact paths for the basename
            encoding: Text encoding of the data file
            fsync: Whether writers fsync the data file before committing
        """
        self.paths = paths
        self.encoding = encoding
        self.fsync = fsync
        self.index = RevisionIndex(paths.index_path)
        self._exporter = RevisionExporter(paths.data_path, self.index, encoding=encoding)

    def create_revision(self, headers: Sequence[str]) -> RevisionWriter:
        """
        Start a new revision session.
        
        The data file is created with headers as its first line if it does
        not exist yet; an existing header is never rewritten.
        """
        data_path = self.paths.data_path
        if not data_path.exists():
            data_path.parent.mkdir(parents=True, exist_ok=True)
            with open(data_path, "w", encoding=self.encoding, newline="") as f:
                csv.writer(f, lineterminator="\n").writerow(list(headers))
            logger.info(f"Created data file: {data_path}")
        
        return RevisionWriter(data_path, self.index, encoding=self.encoding, fsync=self.fsync)

    def export_revision(self, revision_id: int, sink: TextIO) -> int:
        """
        Stream a revision's header and rows to sink.
        
        Returns:
            Rows written; 0 means no such revision exists
        """
        return self._exporter.export(revision_id, sink)

    def read_headers(self) -> Optional[List[str]]:
        """Get the data file header, or None if the log is empty."""
        if not self.paths.data_path.exists():
            return None
        return read_data_headers(self.paths.data_path, self.encoding)

    def revisions(self) -> List[Revision]:
        """Get all committed revisions in index order."""
        return self.index.read_all()

    def latest_revision_id(self) -> int:
        return self.index.latest_id()
