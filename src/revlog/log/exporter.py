"""
Point-in-time export of a single revision.

Looks the revision up in the index, seeks the data file straight to its
byte offset and copies at most `rows` rows, so export cost does not depend
on how much history precedes the revision.
"""

import csv
import io
import logging
from pathlib import Path
from typing import List, TextIO

from ..core.csv_format import read_records, widen_field_size_limit
from ..core.exceptions import DecodeError
from .index import RevisionIndex

logger = logging.getLogger(__name__)


def read_data_headers(data_path: Path, encoding: str = "utf-8") -> List[str]:
    """
    Read the header record of a data file.
    
    Raises:
        DecodeError: If the data file is empty
    """
    widen_field_size_limit()
    with open(data_path, "r", encoding=encoding, newline="") as f:
        headers = next(read_records(csv.reader(f), data_path), None)
    if headers is None:
        raise DecodeError(f"Data file has no header: {data_path}")
    return headers


class RevisionExporter:
    """
    Reads revisions back out of the data file.
    """

    def __init__(self, data_path: Path, index: RevisionIndex, encoding: str = "utf-8"):
        self.data_path = Path(data_path)
        self.index = index
        self.encoding = encoding

    def export(self, revision_id: int, sink: TextIO) -> int:
        """
        Write the header and rows of a revision to sink as CSV.
        
        Copying stops early if the data file ends before `rows` rows.
        
        Args:
            revision_id: Id of the revision to export
            sink: Writable text stream
            
        Returns:
            Number of rows copied, 0 if the revision does not exist
        """
        revision = self.index.find(revision_id)
        if revision is None:
            logger.debug(f"Revision {revision_id} not found in {self.index.path}")
            return 0
        
        writer = csv.writer(sink, lineterminator="\n")
        writer.writerow(read_data_headers(self.data_path, self.encoding))
        
        rows = 0
        with open(self.data_path, "rb") as raw:
            raw.seek(revision.byte_offset)
            with io.TextIOWrapper(raw, encoding=self.encoding, newline="") as stream:
                for row in read_records(csv.reader(stream), self.data_path):
                    writer.writerow(row)
                    rows += 1
                    if rows == revision.rows:
                        break
        
        if rows < revision.rows:
            logger.warning(
                f"Revision {revision_id} expects {revision.rows:,} rows "
                f"but the data file ended after {rows:,}"
            )
        logger.info(f"Exported revision {revision_id}: {rows:,} rows")
        return rows
