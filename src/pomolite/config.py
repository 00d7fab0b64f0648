"""Store path and logging configuration.

The active store path is resolved in this order:

1. an explicit path (``--db`` on the command line)
2. the ``POMOLITE_DB_PATH`` environment variable
3. ``[database] path`` in ``config.toml`` at the project root
4. a ``POMOLITE_DB_PATH=`` line in ``.env`` at the project root
5. ``data/pomolite.db`` under the project root

Relative paths are resolved against the project root.
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

import pyrootutils
import tomlkit

ENV_DB_PATH = "POMOLITE_DB_PATH"
ROOT_INDICATORS = ["config.toml", ".git", "pyproject.toml"]
DEFAULT_DB_NAME = "pomolite.db"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - [%(levelname)s] - %(message)s (%(filename)s:%(lineno)d)"


class ConfigError(Exception):
    """Raised when config.toml exists but cannot be read."""


def find_project_root(search_from: str | Path = ".") -> Path:
    """Find the project root, falling back to ``search_from`` itself."""
    try:
        return Path(pyrootutils.find_root(search_from=search_from, indicator=ROOT_INDICATORS))
    except FileNotFoundError:
        return Path(search_from).resolve()


def config_path(root: Path) -> Path:
    return root / "config.toml"


def default_db_path(root: Path) -> Path:
    return root / "data" / DEFAULT_DB_NAME


def load_config(root: Path) -> dict[str, Any]:
    """Read config.toml, returning an empty dict when there is none."""
    path = config_path(root)
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid {path}: {e}") from e


def _read_env_file(root: Path) -> str | None:
    env_file = root / ".env"
    if not env_file.exists():
        return None
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line.startswith(f"{ENV_DB_PATH}="):
                return line.split("=", 1)[1].strip().strip('"').strip("'")
    return None


def _resolve(root: Path, path: str | Path) -> Path:
    path = Path(path).expanduser()
    return path if path.is_absolute() else root / path


def get_active_db(root: Path, explicit: str | Path | None = None) -> Path:
    """Resolve the store path to use."""
    if explicit:
        return _resolve(root, explicit)

    if env_path := os.environ.get(ENV_DB_PATH):
        return _resolve(root, env_path)

    if path := load_config(root).get("database", {}).get("path"):
        return _resolve(root, path)

    if env_path := _read_env_file(root):
        return _resolve(root, env_path)

    return default_db_path(root)


def get_log_level(root: Path) -> str:
    level = load_config(root).get("logging", {}).get("level", DEFAULT_LOG_LEVEL)
    return str(level).upper()


def set_db_path(root: Path, db_path: str | Path) -> Path:
    """Point ``[database] path`` in config.toml at ``db_path``.

    Existing comments and other tables in config.toml are preserved.
    """
    path = config_path(root)
    if path.exists():
        with open(path, "r") as f:
            config = tomlkit.load(f)
    else:
        config = tomlkit.document()

    if "database" not in config:
        config["database"] = tomlkit.table()
    config["database"]["path"] = str(db_path)

    with open(path, "w") as f:
        tomlkit.dump(config, f)
    return path


def reset_db_path(root: Path) -> bool:
    """Remove the ``[database]`` override. Returns whether one was present."""
    path = config_path(root)
    if not path.exists():
        return False

    with open(path, "r") as f:
        config = tomlkit.load(f)

    if "database" not in config:
        return False

    del config["database"]
    with open(path, "w") as f:
        tomlkit.dump(config, f)
    return True


def configure_logging(level: str | int = DEFAULT_LOG_LEVEL) -> None:
    """Send package log records to stderr at ``level``."""
    logger = logging.getLogger("pomolite")
    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setStream(sys.stderr)
            return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
