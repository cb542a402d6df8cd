"""
Runner module for change detection and export.
"""

from .change_runner import ChangeDetector, add, export

__all__ = ["ChangeDetector", "add", "export"]
