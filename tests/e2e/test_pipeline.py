"""
End-to-end tests for the add/export flow.

These tests exercise the complete flow on disk:
1. Dataset A is ingested into an empty log
2. Re-ingesting A produces no revision
3. Dataset A' (one changed row) produces a second revision
4. Each revision exports exactly its own rows
"""

import csv
import io

import pytest

from revlog import RevisionNotFoundError, RevlogConfig, add, export
from revlog.core.models import LogPaths


def _export_rows(basename, revision_id):
    sink = io.StringIO()
    count = export(basename, revision_id, sink)
    return count, list(csv.reader(io.StringIO(sink.getvalue())))


@pytest.mark.e2e
class TestEndToEndPipeline:
    """End-to-end tests for ingestion and export."""
    
    def test_snapshot_sequence(self, basename, tmp_path, csv_writer, dataset_a, dataset_a_prime):
        """A, A, A' yields revisions 1 and 2 with the expected rows."""
        input_a = csv_writer(tmp_path / "a.csv", dataset_a)
        input_a_prime = csv_writer(tmp_path / "a_prime.csv", dataset_a_prime)
        
        first = add(basename, input_a)
        assert first.revision.id == 1
        assert first.additions == 3
        assert first.updates == 0
        
        second = add(basename, input_a)
        assert second.revision is None
        assert "no changes" in second.summary()
        
        third = add(basename, input_a_prime)
        assert third.revision.id == 2
        assert third.additions == 0
        assert third.updates == 1
        
        count, rows = _export_rows(basename, 1)
        assert count == 3
        assert rows == dataset_a
        
        count, rows = _export_rows(basename, 2)
        assert count == 1
        assert rows == [dataset_a[0], dataset_a_prime[2]]
    
    def test_revisions_are_disjoint(self, basename, tmp_path, csv_writer, headers):
        """Revision ids are 1..N and each starts where the previous ended."""
        for i in range(1, 5):
            rows = [headers] + [[str(k), f"street {k}", f"v{i}"] for k in range(1, i + 1)]
            add(basename, csv_writer(tmp_path / f"snap{i}.csv", rows))
        
        paths = LogPaths.from_basename(basename)
        with open(paths.index_path, encoding="utf-8", newline="") as f:
            revisions = [tuple(int(v) for v in row.values()) for row in csv.DictReader(f)]
        
        assert [r[0] for r in revisions] == [1, 2, 3, 4]
        assert [r[2] for r in revisions] == [1, 2, 3, 4]
        
        data = paths.data_path.read_bytes()
        bounds = [r[1] for r in revisions] + [len(data)]
        for (rev_id, offset, rows), end in zip(revisions, bounds[1:]):
            assert data[offset:end].count(b"\n") == rows
    
    def test_export_unknown_revision(self, basename, tmp_path, csv_writer, dataset_a):
        add(basename, csv_writer(tmp_path / "a.csv", dataset_a))
        
        with pytest.raises(RevisionNotFoundError) as exc_info:
            export(basename, 7, io.StringIO())
        assert exc_info.value.revision_id == 7
        assert str(exc_info.value) == "revision 7 does not exist"
    
    def test_custom_suffixes(self, basename, tmp_path, csv_writer, dataset_a):
        config_path = tmp_path / "revlog.yaml"
        config_path.write_text(
            "log:\n  index_suffix: .index.csv\n  cache_suffix: .cache.bin\n",
            encoding="utf-8",
        )
        config = RevlogConfig(config_path=config_path)
        
        add(basename, csv_writer(tmp_path / "a.csv", dataset_a), config=config)
        
        assert (tmp_path / "violations.csv").exists()
        assert (tmp_path / "violations.index.csv").exists()
        assert (tmp_path / "violations.cache.bin").exists()
        
        sink = io.StringIO()
        assert export(basename, 1, sink, config=config) == 3
