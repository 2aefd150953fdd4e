"""User settings persisted as JSON in the platform config directory."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
SONG_ORDERS = ("album", "track_number", "artist", "title")
VOLUME_RANGE = (0, 100)


@dataclass(frozen=True)
class AppConfig:
    """Settings read once at startup and written back on sort change or exit.

    ``db_path`` and ``music_dir`` are stored as strings so the JSON stays
    hand-editable; ``None`` means "use the default location".
    """

    db_path: Optional[str] = None
    music_dir: Optional[str] = None
    song_order: str = "album"
    search_placeholder: str = ""
    auto_advance: bool = True
    volume: int = 100


def get_config_dir(app_name: str = "rumu") -> Path:
    """Return (and create) the per-user config directory."""
    home = Path.home()
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else home / "AppData" / "Roaming"
    elif os.name == "posix" and _is_macos():
        base = home / "Library" / "Application Support"
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else home / ".config"
    directory = base / app_name
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def load_config() -> AppConfig:
    """Read settings; a missing or unreadable file yields the defaults."""
    path = get_config_path()
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return AppConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Ignoring unreadable config %s", path)
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return AppConfig()
    return _config_from_mapping(raw)


def save_config(cfg: AppConfig) -> None:
    """Write settings through a temp file so a crash never truncates them."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_suffix(".tmp")
    staging.write_text(json.dumps(asdict(cfg), indent=2), encoding="utf-8")
    os.replace(staging, path)
    logger.debug("Saved config to %s", path)


def _is_macos() -> bool:
    uname = getattr(os, "uname", None)
    return uname is not None and uname().sysname == "Darwin"


def _pick_bool(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key)
    return value if isinstance(value, bool) else default


def _pick_volume(raw: Mapping[str, Any]) -> int:
    value = raw.get("volume")
    if isinstance(value, bool) or not isinstance(value, int):
        return AppConfig.volume
    low, high = VOLUME_RANGE
    return min(high, max(low, value))


def _pick_path(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    return value if isinstance(value, str) and value else None


def _config_from_mapping(raw: Mapping[str, Any]) -> AppConfig:
    """Coerce decoded JSON into an AppConfig, dropping invalid values."""
    song_order = raw.get("song_order")
    placeholder = raw.get("search_placeholder")
    return AppConfig(
        db_path=_pick_path(raw, "db_path"),
        music_dir=_pick_path(raw, "music_dir"),
        song_order=song_order if song_order in SONG_ORDERS else AppConfig.song_order,
        search_placeholder=placeholder if isinstance(placeholder, str) else "",
        auto_advance=_pick_bool(raw, "auto_advance", AppConfig.auto_advance),
        volume=_pick_volume(raw),
    )
