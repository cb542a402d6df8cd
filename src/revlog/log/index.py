"""
Index file management for the revision log.

The index is a small CSV file with one record per committed revision:

    id,byte_offset,rows
    1,15,3
    2,57,1

It is append-only; assigning the next id scans the whole file, which is
cheap because there is one record per run rather than per row.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..core.csv_format import read_records
from ..core.exceptions import DecodeError
from ..core.models import Revision

logger = logging.getLogger(__name__)

INDEX_HEADERS = ["id", "byte_offset", "rows"]


def _parse_field(record: Dict[str, Optional[str]], name: str, line_number: int) -> int:
    value = record.get(name)
    if value is None or not value.isascii() or not value.isdigit():
        raise DecodeError(
            f"Invalid index record at line {line_number}: {name}={value!r}",
            line_number=line_number,
        )
    return int(value)


class RevisionIndex:
    """
    Reader/writer for the revision index file.
    """

    def __init__(self, path: Path):
        """
        Initialize the index.
        
        Args:
            path: Path to the {basename}.revisions.csv file
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def create(self) -> None:
        """Create an empty index holding only its header."""
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            csv.writer(f, lineterminator="\n").writerow(INDEX_HEADERS)
        logger.debug(f"Created revision index: {self.path}")

    def read_all(self) -> List[Revision]:
        """
        Read every revision record.
        
        Returns:
            Revisions in file order; empty if the index does not exist
        """
        if not self.path.exists():
            return []
        
        revisions = []
        with open(self.path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for record in read_records(reader, self.path):
                line_number = reader.line_num
                revisions.append(Revision(
                    id=_parse_field(record, "id", line_number),
                    byte_offset=_parse_field(record, "byte_offset", line_number),
                    rows=_parse_field(record, "rows", line_number),
                ))
        return revisions

    def find(self, revision_id: int) -> Optional[Revision]:
        """Get the revision with the given id, if committed."""
        for revision in self.read_all():
            if revision.id == revision_id:
                return revision
        return None

    def latest_id(self) -> int:
        """Get the highest committed revision id (0 when none)."""
        return max((revision.id for revision in self.read_all()), default=0)

    def append(self, byte_offset: int, rows: int) -> Revision:
        """
        Commit a new revision record.
        
        Args:
            byte_offset: Data file offset where the revision's rows start
            rows: Number of rows in the revision
            
        Returns:
            The committed Revision with its newly assigned id
        """
        if not self.path.exists():
            self.create()
        
        revision = Revision(id=self.latest_id() + 1, byte_offset=byte_offset, rows=rows)
        
        with open(self.path, "a", encoding="utf-8", newline="") as f:
            csv.writer(f, lineterminator="\n").writerow(
                [revision.id, revision.byte_offset, revision.rows]
            )
        
        logger.info(
            f"Committed revision {revision.id}: {revision.rows:,} rows at byte {revision.byte_offset:,}"
        )
        return revision
