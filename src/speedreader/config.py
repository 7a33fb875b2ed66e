"""Configuration persistence: load, save and fold session statistics."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

from platformdirs import user_config_dir

from speedreader.models import CONFIG_APP_NAME, DEFAULT_WPM, UserConfig
from speedreader.themes import normalize_theme_index

if TYPE_CHECKING:
    from speedreader.session import ReaderSession

logger = logging.getLogger(__name__)

# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field            Rule                      On violation
#   ───────────────  ────────────────────────  ─────────────────
#   wpm              int > 0                   DEFAULT_WPM
#   theme_index      0 ≤ x < len(themes)       0
#   total_*          int ≥ 0                   0
#   scalar fields    type-checked              field default
#
CONFIG_FILENAME = "config.json"


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/speedreader/config.json
    - macOS: ~/Library/Application Support/speedreader/config.json
    - Windows: %APPDATA%/speedreader/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "wpm": config.wpm,
        "theme_index": config.theme_index,
        "ramp_speed": config.ramp_speed,
        "zen_mode": config.zen_mode,
        "total_articles": config.total_articles,
        "total_words": config.total_words,
        "miniflux_url": config.miniflux_url,
    }


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type. Booleans
    are not accepted where an int is expected.
    """
    value = data.get(key, default)
    if expected_type is int and isinstance(value, bool):
        return default
    if not isinstance(value, expected_type):
        return default
    return value


def _coerce_wpm(value: int) -> int:
    return value if value > 0 else DEFAULT_WPM


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    return UserConfig(
        wpm=_coerce_wpm(_safe_get(data, "wpm", DEFAULT_WPM, int)),
        theme_index=normalize_theme_index(_safe_get(data, "theme_index", 0, int)),
        ramp_speed=_safe_get(data, "ramp_speed", False, bool),
        zen_mode=_safe_get(data, "zen_mode", False, bool),
        total_articles=max(0, _safe_get(data, "total_articles", 0, int)),
        total_words=max(0, _safe_get(data, "total_words", 0, int)),
        miniflux_url=_safe_get(data, "miniflux_url", "", str),
        version=_safe_get(data, "version", 1, int),
    )


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        return UserConfig()
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return UserConfig()
    if not isinstance(data, dict):
        logger.warning("Config file root is not an object, using defaults")
        return UserConfig()
    return _dict_to_config(data)


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically.

    Writes to a temp file in the config directory, then os.replace()s it
    over the real file. Returns True on success, False on failure.
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=config_path.parent, suffix=".tmp", prefix=".config-")
        closed = False
        try:
            os.write(fd, json_str.encode("utf-8"))
            os.close(fd)
            closed = True
            os.replace(tmp_path, config_path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


def fold_session_totals(config: UserConfig, session: ReaderSession) -> UserConfig:
    """Copy session preferences into ``config`` and add its reading counters."""
    config.wpm = session.wpm
    config.theme_index = normalize_theme_index(session.theme_index)
    config.ramp_speed = session.ramp_enabled
    config.zen_mode = session.distraction_free
    config.total_articles += session.session_articles
    config.total_words += session.session_words
    return config


__all__ = [
    "CONFIG_FILENAME",
    "_config_to_dict",
    "_dict_to_config",
    "_safe_get",
    "fold_session_totals",
    "get_config_path",
    "load_config",
    "save_config",
]
