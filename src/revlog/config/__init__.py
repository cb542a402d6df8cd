"""
Configuration for the revision log.
"""

from .config_loader import RevlogConfig, DEFAULT_CONFIG

__all__ = ["RevlogConfig", "DEFAULT_CONFIG"]
