"""
Change-detection driver.

Feeds a new snapshot through the fingerprint cache and appends every added
or changed row to the revision log as one revision.
"""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence, TextIO

from ..cache import FingerprintCache, parse_primary_key
from ..config import RevlogConfig
from ..core.csv_format import read_records, widen_field_size_limit
from ..core.exceptions import DecodeError, RevisionNotFoundError, SchemaError
from ..core.models import IngestReport, LogPaths, UpdateType
from ..log import RevisionLog


logger = logging.getLogger(__name__)

PRIMARY_KEY_INDEX = 0


class ChangeDetector:
    """
    Orchestrates one ingestion run against a log basename.
    
    Manages the workflow:
    1. Validate the input header
    2. Load the fingerprint cache
    3. Append added/changed rows to a new revision
    4. Commit the revision and persist the cache
    """

    def __init__(
        self,
        paths: LogPaths,
        cache: Optional[FingerprintCache] = None,
        primary_key_column: Optional[str] = None,
        encoding: str = "utf-8",
        fsync: bool = False,
        report_interval: int = 100000,
    ):
        """
        Initialize the change detector.
        
        Args:
            paths: Artifact paths for the log basename
            cache: Fingerprint cache to use (loaded from paths.cache_path when None)
            primary_key_column: Required name of the first column, if any
            encoding: Text encoding of the data file
            fsync: Whether to fsync the data file before committing
            report_interval: Rows between progress log lines (0 disables)
        """
        self.paths = paths
        self.cache = cache
        self.primary_key_column = primary_key_column
        self.report_interval = report_interval
        self.log = RevisionLog(paths, encoding=encoding, fsync=fsync)

    @classmethod
    def from_config(cls, basename: str, config: RevlogConfig) -> "ChangeDetector":
        """Build a detector for a basename from configuration."""
        log_config = config.get_log_config()
        return cls(
            paths=config.get_paths(basename),
            primary_key_column=config.get("input.primary_key_column"),
            encoding=log_config.get("encoding", "utf-8"),
            fsync=bool(log_config.get("fsync", False)),
            report_interval=int(config.get("runner.report_interval", 100000)),
        )

    def validate_headers(self, headers: Sequence[str]) -> None:
        """
        Check the input header against the configured key column and the log.
        
        Raises:
            SchemaError: If the header is unusable for this log
        """
        if not headers:
            raise SchemaError("Input dataset has no header row")
        
        if self.primary_key_column is not None and headers[PRIMARY_KEY_INDEX] != self.primary_key_column:
            raise SchemaError(
                f"Expected primary-key column {self.primary_key_column!r} first, "
                f"found {headers[PRIMARY_KEY_INDEX]!r}"
            )
        
        existing = self.log.read_headers()
        if existing is not None and list(existing) != list(headers):
            raise SchemaError(
                f"Input header {list(headers)} does not match log header {existing}"
            )

    def _load_cache(self) -> FingerprintCache:
        if self.cache is None:
            self.cache = FingerprintCache()
            if not self.cache.load_if_exists(self.paths.cache_path):
                logger.info(f"No fingerprint cache at {self.paths.cache_path}; starting empty")
        return self.cache

    def process(self, headers: Sequence[str], rows: Iterable[Sequence]) -> IngestReport:
        """
        Run change detection over parsed rows.
        
        Args:
            headers: Input header row, primary-key column first
            rows: Data rows in input order
            
        Returns:
            IngestReport for the run
        """
        report = IngestReport(started_at=datetime.now(timezone.utc))
        
        self.validate_headers(headers)
        cache = self._load_cache()
        column_count = len(headers)
        
        logger.info(f"Starting change detection for {self.paths.basename}")
        
        with self.log.create_revision(headers) as writer:
            for row_number, row in enumerate(rows, 1):
                if len(row) != column_count:
                    raise DecodeError(
                        f"Row {row_number} has {len(row)} columns, expected {column_count}",
                        line_number=row_number,
                    )
                
                primary_key = parse_primary_key(row[PRIMARY_KEY_INDEX])
                update = cache.update(primary_key, row)
                
                if update is not None:
                    writer.write(row)
                    if update is UpdateType.ADDED:
                        report.additions += 1
                    else:
                        report.updates += 1
                    logger.debug(f"{update.as_str()} {primary_key}")
                
                report.rows_processed = row_number
                if self.report_interval and row_number % self.report_interval == 0:
                    logger.info(f"Processed {row_number:,} rows")
            
            report.revision = writer.complete()
        
        if report.revision is not None:
            cache.serialize(self.paths.cache_path)
        else:
            logger.info("No changes found; cache left untouched")
        
        report.completed_at = datetime.now(timezone.utc)
        logger.info(
            f"Finished processing {report.rows_processed:,} rows "
            f"({report.additions:,} additions, {report.updates:,} updates)"
        )
        return report

    def process_file(self, input_path: Path, encoding: str = "utf-8") -> IngestReport:
        """Run change detection over a CSV file."""
        input_path = Path(input_path)
        logger.info(f"Reading input dataset: {input_path}")
        
        widen_field_size_limit()
        with open(input_path, "r", encoding=encoding, newline="") as f:
            records = read_records(csv.reader(f), input_path)
            headers = next(records, None)
            if headers is None:
                raise SchemaError(f"Input dataset is empty: {input_path}")
            # Blank lines carry no row
            return self.process(headers, (row for row in records if row))


def add(basename: str, input_path: Path, config: Optional[RevlogConfig] = None) -> IngestReport:
    """
    Ingest a snapshot into the log for basename.
    
    Returns:
        IngestReport; report.revision is None when nothing changed
    """
    config = config or RevlogConfig()
    detector = ChangeDetector.from_config(basename, config)
    return detector.process_file(input_path, encoding=config.get("input.encoding", "utf-8"))


def export(
    basename: str,
    revision_id: int,
    sink: TextIO,
    config: Optional[RevlogConfig] = None,
) -> int:
    """
    Write a revision's header and rows to sink.
    
    Raises:
        RevisionNotFoundError: If no revision with that id was committed
    """
    config = config or RevlogConfig()
    log = RevisionLog(
        config.get_paths(basename),
        encoding=config.get("log.encoding", "utf-8"),
    )
    rows = log.export_revision(revision_id, sink)
    if rows == 0:
        raise RevisionNotFoundError(revision_id)
    return rows
