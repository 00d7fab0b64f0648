"""Tests for the pomolite command-line interface."""

import pytest
from click.testing import CliRunner

from conftest import raw_connect
from pomolite.cli import cli, status_line
from pomolite.config import ENV_DB_PATH
from pomolite.store import StoreHandle


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Run commands from an isolated project root."""
    monkeypatch.delenv(ENV_DB_PATH, raising=False)
    (tmp_path / "pyproject.toml").touch()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


class TestInit:
    """Tests for the init command."""

    def test_init_default_store(self, project, runner):
        """Test init creates data/pomolite.db and prints Success."""
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "Success"
        assert (project / "data" / "pomolite.db").exists()

    def test_init_twice(self, project, runner):
        """Test init is repeatable."""
        runner.invoke(cli, ["init"])
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "Success" in result.output

    def test_init_failure(self, project, runner):
        """Test a failing bootstrap prints the error and exits 1."""
        path = project / "broken.db"
        conn = raw_connect(path)
        conn.execute("CREATE TABLE activity_type(id INTEGER)")
        conn.commit()
        conn.close()

        result = runner.invoke(cli, ["--db", str(path), "init"])
        assert result.exit_code == 1
        assert "Error: " in result.output
        assert "activity_type" in result.output


class TestVersion:
    """Tests for the version command."""

    def test_version_after_init(self, project, runner):
        """Test the stored version is printed."""
        runner.invoke(cli, ["init"])
        result = runner.invoke(cli, ["version"])
        assert result.output.strip() == "1"

    def test_version_absent(self, project, runner):
        """Test an empty store prints absent."""
        (project / "empty.db").touch()
        result = runner.invoke(cli, ["--db", "empty.db", "version"])
        assert result.output.strip() == "absent"

    def test_version_missing_file(self, project, runner):
        """Test a missing store is an error."""
        result = runner.invoke(cli, ["--db", "nope.db", "version"])
        assert result.exit_code != 0
        assert "Store not found" in result.output


class TestInfo:
    """Tests for the info command."""

    def test_info(self, project, runner):
        """Test info lists tables, properties and activity types."""
        runner.invoke(cli, ["init"])
        result = runner.invoke(cli, ["info"])
        assert result.exit_code == 0, result.output
        assert "Version: 1" in result.output
        assert "activity_type" in result.output
        assert "version: 1" in result.output
        assert "short_break" in result.output

    def test_info_missing_tables(self, project, runner):
        """Test info flags tables the store lacks."""
        (project / "empty.db").touch()
        result = runner.invoke(cli, ["--db", "empty.db", "info"])
        assert result.exit_code == 0, result.output
        assert "Version: absent" in result.output
        assert "(missing)" in result.output

    def test_info_not_a_store(self, project, runner):
        """Test a file that is not SQLite is reported cleanly."""
        (project / "junk.db").write_text("this is not a database" * 10)
        result = runner.invoke(cli, ["--db", "junk.db", "info"])
        assert result.exit_code == 1
        assert "not a database" in result.output


class TestUse:
    """Tests for switching stores."""

    def test_use_and_reset(self, project, runner):
        """Test use writes config.toml and --reset removes it."""
        result = runner.invoke(cli, ["use", "data/other.db"])
        assert result.exit_code == 0, result.output
        assert runner.invoke(cli, ["path"]).output.strip() == str(project / "data" / "other.db")

        result = runner.invoke(cli, ["use", "--reset"])
        assert "Removed database override" in result.output
        assert runner.invoke(cli, ["path"]).output.strip() == str(project / "data" / "pomolite.db")

    def test_use_requires_path(self, project, runner):
        """Test use without a path or --reset is an error."""
        result = runner.invoke(cli, ["use"])
        assert result.exit_code != 0
        assert "PATH is required" in result.output


class TestActivities:
    """Tests for the activities command."""

    def test_lists_defaults(self, runner):
        """Test the default activity types are listed."""
        result = runner.invoke(cli, ["activities"])
        assert "work" in result.output
        assert "Take a breather!" in result.output


class TestStatusLine:
    """Tests for status_line."""

    def test_info_is_success(self, store_path):
        """Test an info diagnostic shows Success."""
        with StoreHandle(store_path) as handle:
            assert status_line(handle) == ("Success", "green")

    def test_warning(self, store_path):
        """Test a warning is prefixed."""
        with StoreHandle(store_path) as handle:
            handle.report_warning("disk nearly full")
            assert status_line(handle) == ("Warning: disk nearly full", "yellow")

    def test_error(self, tmp_path):
        """Test an error is prefixed."""
        handle = StoreHandle(tmp_path / "missing" / "store.db")
        text, colour = status_line(handle)
        assert text.startswith("Error: Failed to open")
        assert colour == "red"
