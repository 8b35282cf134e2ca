from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO

from rc4kit.infra.paths import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONFIG_FILENAME,
    SETTING_PATH,
)

logger = logging.getLogger(__name__)

LOCAL_FILENAMES = (DEFAULT_CONFIG_FILENAME, "settings.json")

_LOADERS: dict[str, tuple[str, Callable[[BinaryIO], Any]]] = {
    ".toml": ("TOML", tomllib.load),
    ".json": ("JSON", json.load),
}


def _find_config_file(config_path: str | Path | None) -> Path | None:
    """
    Locate the settings file to read.

    An explicit path wins and is never substituted: if it does not exist the
    lookup fails. Otherwise the working directory is searched for
    `LOCAL_FILENAMES`, then the user-level `SETTING_PATH` is tried.
    """
    if config_path:
        path = Path(config_path).expanduser().resolve()
        if path.is_file():
            return path
        logger.warning("Specified config file not found: %s", path)
        return None

    for name in LOCAL_FILENAMES:
        candidate = Path.cwd() / name
        if candidate.is_file():
            logger.debug("Using local config file: %s", candidate)
            return candidate.resolve()

    if SETTING_PATH.is_file():
        logger.debug("Using user config file: %s", SETTING_PATH)
        return SETTING_PATH.resolve()

    return None


def _read_config_file(path: Path) -> dict[str, Any]:
    """
    Parse a `.toml` or `.json` settings file.

    Raises:
        ValueError: If the extension is unsupported, the content cannot be
            parsed, or the top level is not a table/object.
    """
    try:
        kind, loader = _LOADERS[path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Unsupported config file extension: {path.suffix}") from None

    try:
        with path.open("rb") as f:
            data = loader(f)
    except Exception as e:
        raise ValueError(f"Invalid {kind} in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a table, got {type(data).__name__}")

    return data


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load settings from disk.

    Args:
        config_path: Optional explicit settings file (TOML or JSON).

    Returns:
        The parsed settings mapping.

    Raises:
        FileNotFoundError: If no settings file can be located.
        ValueError: If the located file is malformed.
    """
    path = _find_config_file(config_path)
    if path is None:
        raise FileNotFoundError("No valid config file found.")

    logger.debug("Loading configuration from: %s", path)
    return _read_config_file(path)


def copy_default_config(target: Path) -> None:
    """Write the bundled sample settings to ``target``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(DEFAULT_CONFIG_FILE.read_bytes())
    logger.info("Sample configuration written to: %s", target)


def save_config_file(
    source_path: str | Path, output_path: str | Path | None = None
) -> Path:
    """
    Install a TOML/JSON settings file as the user-level default.

    The source is validated by parsing it, then stored as JSON.

    Args:
        source_path: Settings file to install.
        output_path: Destination JSON path, `SETTING_PATH` by default.

    Returns:
        The resolved destination path.

    Raises:
        FileNotFoundError: If the source file does not exist.
        ValueError: If the source file cannot be parsed.
    """
    source = Path(source_path).expanduser().resolve()
    if not source.is_file():
        raise FileNotFoundError(f"Source file not found: {source}")

    data = _read_config_file(source)
    output = Path(output_path or SETTING_PATH).expanduser().resolve()
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        output.write_text(
            json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
        )
    except OSError as e:
        logger.error("Failed to write config JSON '%s': %s", output, e)
        raise

    logger.info("Configuration saved to JSON: %s", output)
    return output
