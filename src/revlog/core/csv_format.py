"""
CSV reading helpers shared by the input reader and the log files.

The stdlib csv module caps field length at 131072 characters by default;
fields of any length are valid input here, so the cap is raised to the
largest value the platform accepts.
"""

import csv
import sys
from typing import Iterator, List

from .exceptions import DecodeError

def widen_field_size_limit() -> None:
    """Raise csv.field_size_limit to the platform maximum."""
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            break
        except OverflowError:
            # C long is 32 bits on some platforms
            limit //= 2


def read_records(reader, source: object) -> Iterator[List[str]]:
    """
    Iterate a csv.reader, turning parse and decode failures into DecodeError.
    
    Args:
        reader: A csv.reader over a text stream
        source: Path or name used in error messages
    """
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except (csv.Error, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Cannot parse {source} at line {reader.line_num}: {e}",
                line_number=reader.line_num,
            ) from e
        yield record
