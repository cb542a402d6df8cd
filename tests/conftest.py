"""
Shared test fixtures and configuration for pytest.
"""

import csv
import logging
import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


logger = logging.getLogger(__name__)


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (full add/export flow on disk)")


# ============================================================================
# Helpers
# ============================================================================

def write_csv(path: Path, rows: Sequence[Sequence[str]]) -> Path:
    """Write rows (header first) to a CSV file."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        csv.writer(f, lineterminator="\n").writerows(rows)
    return path


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def csv_writer():
    """Fixture providing the write_csv helper."""
    return write_csv


@pytest.fixture
def headers() -> List[str]:
    """Header of the sample dataset."""
    return ["ViolationID", "Street", "Status"]


@pytest.fixture
def dataset_a(headers) -> List[List[str]]:
    """Sample dataset with keys 1, 2 and 3 (header first)."""
    return [
        headers,
        ["1", "Main St", "open"],
        ["2", "Oak Ave", "open"],
        ["3", "Elm St, Apt 4", "closed"],
    ]


@pytest.fixture
def dataset_a_prime(dataset_a) -> List[List[str]]:
    """Dataset A with the second field of key 2 changed."""
    rows = [list(row) for row in dataset_a]
    rows[2][1] = "Oak Avenue"
    return rows


@pytest.fixture
def basename(tmp_path) -> str:
    """Log basename inside a temporary directory."""
    return str(tmp_path / "violations")
