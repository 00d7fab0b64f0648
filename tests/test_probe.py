"""Tests for version probing and store inspection."""

import pytest

from conftest import raw_connect
from pomolite.probe import (
    existing_tables,
    missing_tables,
    parse_version,
    probe_version,
    row_counts,
)
from pomolite.schema import CURRENT_VERSION
from pomolite.store import StoreHandle


def _write_info(path, value):
    conn = raw_connect(path)
    try:
        conn.execute("CREATE TABLE db_info(property TEXT PRIMARY KEY, value TEXT NOT NULL)")
        if value is not None:
            conn.execute("INSERT INTO db_info VALUES ('version', ?)", (value,))
        conn.commit()
    finally:
        conn.close()


class TestParseVersion:
    """Tests for parse_version."""

    @pytest.mark.parametrize("value,expected", [
        ("1", 1),
        ("12", 12),
        (" 3 ", 3),
        (4, 4),
        ("0", 0),
    ])
    def test_valid(self, value, expected):
        """Test integer text parses."""
        assert parse_version(value) == expected

    @pytest.mark.parametrize("value", [None, "", "one", "1.5", "-1", "v1", "1_0", "+1", "\u0661"])
    def test_unusable(self, value):
        """Test non-numeric or negative values are absent."""
        assert parse_version(value) is None


class TestProbeVersion:
    """Tests for probe_version."""

    def test_no_metadata_table(self, handle):
        """Test an empty store has no version."""
        assert probe_version(handle) is None

    def test_no_version_row(self, store_path):
        """Test a db_info table without a version row has no version."""
        _write_info(store_path, None)
        with StoreHandle(store_path) as handle:
            assert probe_version(handle) is None

    def test_non_numeric_version(self, store_path):
        """Test a non-numeric version value is treated as absent."""
        _write_info(store_path, "not-a-number")
        with StoreHandle(store_path) as handle:
            assert probe_version(handle) is None

    def test_numeric_version(self, store_path):
        """Test a stored version is returned as an int."""
        _write_info(store_path, "7")
        with StoreHandle(store_path) as handle:
            assert probe_version(handle) == 7

    def test_closed_handle(self, store_path):
        """Test a closed handle has no version."""
        handle = StoreHandle(store_path)
        handle.close()
        assert probe_version(handle) is None

    def test_bootstrapped(self, bootstrapped):
        """Test a bootstrapped store reports the current version."""
        assert probe_version(bootstrapped) == CURRENT_VERSION


class TestInspection:
    """Tests for table inspection helpers."""

    def test_empty_store(self, handle):
        """Test an empty store is missing every table."""
        assert existing_tables(handle) == set()
        assert missing_tables(handle) == ["db_info", "activity_type", "user", "session"]
        assert row_counts(handle) == {}

    def test_bootstrapped_store(self, bootstrapped):
        """Test a bootstrapped store has every table and its seed rows."""
        assert missing_tables(bootstrapped) == []
        assert row_counts(bootstrapped) == {
            "db_info": 1,
            "activity_type": 3,
            "user": 0,
            "session": 0,
        }

    def test_internal_tables_ignored(self, bootstrapped):
        """Test sqlite_sequence is not reported as a store table."""
        assert "sqlite_sequence" not in existing_tables(bootstrapped)
