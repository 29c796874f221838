"""Typed configuration with explicit defaults and a persisted JSON override file.

``Config`` holds every tunable; ``Config.with_overrides`` is the single place
user values are validated and applied. Persisted overrides live in the
platform config directory and are loaded defensively: a missing or malformed
file never prevents startup.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "csvcols"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_COLORS: tuple[str, ...] = (
    "#2e7d32", "#1565c0", "#ad1457", "#ef6c00", "#6a1b9a",
    "#00838f", "#827717", "#441fa2", "#37474f", "#558b2f",
    "#c62828", "#283593", "#00897b", "#5d4037", "#1976d2",
)

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_SWITCH_ON = {"on", "1", "true"}
_SWITCH_OFF = {"off", "0", "false"}


@dataclass(frozen=True)
class Config:
    colors: tuple[str, ...] = DEFAULT_COLORS
    mode: str = "bg"
    max_columns: int = 128
    patterns: tuple[str, ...] = ("*.csv", "*.tsv")
    filetypes: tuple[str, ...] = ("csv", "tsv")

    default_header_lines: int = 1
    show_header_controls: bool = True

    # Clean view: widths from the whole file (cached per content version) or
    # from the visible region only.
    clean_view_full_scan: bool = False

    auto_detect_separator: bool = True
    detect_candidates: tuple[str, ...] = ("\t", ",", ";", "|")
    detect_max_lines: int = 200
    detect_nonempty_limit: int = 10

    auto_enable_any_buffer: bool = True
    auto_enable_num_columns: int = 3
    auto_enable_agree_level: float = 0.7
    auto_enable_min_columns: int = 2
    auto_enable_min_agree: float = 0.7
    auto_enable_probe_lines: int = 200
    auto_enable_nonempty: int = 20

    auto_enable_clean_view: bool = False

    style: str = "monokai"

    def with_overrides(self, overrides: Mapping[str, object]) -> Config:
        """Return a copy with ``overrides`` applied.

        Raises ``ConfigError`` for unknown keys and ill-typed or out-of-range
        values; nothing is applied in that case.
        """
        known = {field.name: field for field in fields(self)}
        changes: dict[str, object] = {}
        for key, raw in overrides.items():
            if key not in known:
                raise ConfigError(f"unknown option: {key}")
            changes[key] = _coerce_option(key, raw, getattr(self, key))
        return replace(self, **changes)

    def to_dict(self) -> dict[str, object]:
        return {key: list(value) if isinstance(value, tuple) else value for key, value in asdict(self).items()}


def _coerce_option(key: str, raw: object, default: object) -> object:
    if isinstance(default, bool):
        if not isinstance(raw, bool):
            raise ConfigError(f"{key} expects a boolean")
        return raw
    if isinstance(default, int):
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ConfigError(f"{key} expects an integer")
        minimum = 0 if key == "default_header_lines" else 1
        if raw < minimum:
            raise ConfigError(f"{key} must be >= {minimum}")
        return raw
    if isinstance(default, float):
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ConfigError(f"{key} expects a number")
        if not 0.0 <= float(raw) <= 1.0:
            raise ConfigError(f"{key} must be between 0 and 1")
        return float(raw)
    if isinstance(default, tuple):
        if not isinstance(raw, (list, tuple)) or not raw:
            raise ConfigError(f"{key} expects a non-empty list")
        if not all(isinstance(item, str) and item for item in raw):
            raise ConfigError(f"{key} expects a list of strings")
        items = tuple(raw)
        if key == "colors" and not all(_HEX_COLOR_RE.match(item) for item in items):
            raise ConfigError("colors expects '#rrggbb' values")
        if key == "detect_candidates" and not all(len(item) == 1 for item in items):
            raise ConfigError("detect_candidates expects single characters")
        return items
    if not isinstance(raw, str):
        raise ConfigError(f"{key} expects a string")
    if key == "mode" and raw not in {"bg", "fg"}:
        raise ConfigError("mode must be 'bg' or 'fg'")
    return raw


def parse_header_count(text: str) -> int:
    """Parse a header-line count argument; fractions floor, negatives clamp to 0."""
    try:
        value = float(text.strip())
    except ValueError as exc:
        raise ConfigError(f"header expects a number, got {text!r}") from exc
    if not math.isfinite(value):
        raise ConfigError(f"header expects a number, got {text!r}")
    return max(0, math.floor(value))


def parse_switch(text: str) -> bool:
    """Parse an ``on``/``off`` style switch argument."""
    word = text.strip().lower()
    if word in _SWITCH_ON:
        return True
    if word in _SWITCH_OFF:
        return False
    raise ConfigError(f"expected on|off, got {text!r}")


def load_config() -> dict[str, object]:
    """Load the persisted JSON override object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist override data as pretty-printed JSON; filesystem errors are ignored."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        logger.debug("could not write %s", CONFIG_PATH, exc_info=True)


def load_settings(base: Config | None = None) -> Config:
    """Merge persisted overrides over ``base`` (defaults when omitted).

    Invalid entries are dropped one by one so a single bad value does not
    discard the rest of the file.
    """
    config = base if base is not None else Config()
    for key, value in load_config().items():
        try:
            config = config.with_overrides({key: value})
        except ConfigError as exc:
            logger.debug("ignoring persisted option %s: %s", key, exc)
    return config


def save_settings(config: Config, keys: tuple[str, ...]) -> None:
    """Persist the current values of ``keys`` into the override file."""
    data = load_config()
    current = config.to_dict()
    for key in keys:
        data[key] = current[key]
    save_config(data)
