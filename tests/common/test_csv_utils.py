"""Tests for src/common/csv_utils.py"""

import pytest

from src.common.csv_utils import write_csv


class TestWriteCsv:
    def test_writes_header_and_rows(self, tmp_path):
        path = tmp_path / "out.csv"
        count = write_csv(path, [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}])

        assert count == 2
        assert path.read_text(encoding="utf-8") == "a,b\n1,2\n3,4\n"

    def test_custom_header_titles(self, tmp_path):
        path = tmp_path / "out.csv"
        write_csv(path, [{"a": "1"}], fieldnames=["a"], header=["Column A"])
        assert path.read_text(encoding="utf-8") == "Column A\n1\n"

    def test_preamble_before_header(self, tmp_path):
        path = tmp_path / "out.csv"
        write_csv(path, [{"a": "1"}], preamble=["## first", "## second"])
        assert path.read_text(encoding="utf-8").splitlines() == ["## first", "## second", "a", "1"]

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "out.csv"
        write_csv(path, [{"a": "1"}])
        assert path.exists()

    def test_quotes_values_with_commas(self, tmp_path):
        path = tmp_path / "out.csv"
        write_csv(path, [{"name": "Shoe, trail"}])
        assert '"Shoe, trail"' in path.read_text(encoding="utf-8")

    def test_no_rows_with_fieldnames(self, tmp_path):
        path = tmp_path / "out.csv"
        assert write_csv(path, [], fieldnames=["a", "b"]) == 0
        assert path.read_text(encoding="utf-8") == "a,b\n"

    def test_no_rows_without_fieldnames_raises(self, tmp_path):
        with pytest.raises(ValueError):
            write_csv(tmp_path / "out.csv", [])
