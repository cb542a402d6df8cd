"""
Custom exceptions for the revision log.

I/O failures are not wrapped: the builtin OSError family (FileNotFoundError,
PermissionError, ...) propagates unchanged from the file operations.
"""

from typing import Optional


class RevlogError(Exception):
    """Base exception for all revision log errors."""
    pass


class DecodeError(RevlogError):
    """
    Error decoding stored or incoming data.
    
    Raised when:
    - A cache file length is not a whole number of records
    - An index record is missing fields or is not numeric
    - A primary key is not an unsigned 64-bit integer
    - A row has a different column count than the header
    """
    
    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number


class SchemaError(RevlogError):
    """
    Error in the shape of an input dataset.
    
    Raised when:
    - The header is empty or the primary-key column is not first
    - The header differs from the one already stored in the log
    """
    pass


class RevisionNotFoundError(RevlogError):
    """Raised when exporting a revision id that was never committed."""
    
    def __init__(self, revision_id: int):
        super().__init__(f"revision {revision_id} does not exist")
        self.revision_id = revision_id
