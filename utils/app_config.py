"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB (data folder,
log level). Config lives in ~/.safe_ledger/config.json to avoid a bootstrapping
problem.
"""
import json
import logging
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".safe_ledger"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_LOG_LEVEL = "WARNING"

logger = logging.getLogger(__name__)


def load_config(config_file: Path = CONFIG_FILE) -> dict:
    """Returns {} on missing or corrupt file, never raises."""
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_file, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict, config_file: Path = CONFIG_FILE) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    tmp = config_file.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, config_file)
    except OSError:
        logger.exception("Could not save config to %s", config_file)
        tmp.unlink(missing_ok=True)


def get_data_folder(config_file: Path = CONFIG_FILE) -> str | None:
    """Return config["data_folder"] or None if not set."""
    return load_config(config_file).get("data_folder")


def set_data_folder(path: str | None, config_file: Path = CONFIG_FILE) -> None:
    """Update data_folder in config and save."""
    config = load_config(config_file)
    if path is None:
        config.pop("data_folder", None)
    else:
        config["data_folder"] = path
    save_config(config, config_file)


def get_log_level(config_file: Path = CONFIG_FILE) -> str:
    level = str(load_config(config_file).get("log_level", DEFAULT_LOG_LEVEL)).upper()
    return level if isinstance(logging.getLevelName(level), int) else DEFAULT_LOG_LEVEL
