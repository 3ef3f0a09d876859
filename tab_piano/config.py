"""User settings for playback timing and the tab editor.

Settings are read from a YAML file and merged over the built-in defaults::

    bpm: 96
    editor:
      default_steps: 32
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from tab_piano.tab.grid import DEFAULT_STEPS, MAX_STEPS, MIN_STEPS
from tab_piano.timeline import DEFAULT_GATE, DEFAULT_STEPS_PER_BEAT

logger = logging.getLogger(__name__)

USER_CONFIG_PATH = Path.home() / ".config" / "tab-piano" / "config.yaml"

# YAML sections flattened onto Settings fields
SECTIONS: dict[str, tuple[str, ...]] = {
    "playback": ("bpm", "steps_per_beat", "gate"),
    "editor": ("default_steps", "min_steps", "max_steps"),
}


@dataclass(frozen=True)
class Settings:
    """Playback and editor settings.

    Parameters
    ----------
    bpm : float
        Playback tempo in beats per minute.
    steps_per_beat : int
        Timeline steps per beat (2 means each step is an eighth note).
    gate : float
        Fraction of a step each note sounds for (0-1].
    default_steps : int
        Length of a new editor grid.
    min_steps : int
        Shortest allowed editor grid.
    max_steps : int
        Longest allowed editor grid.
    """

    bpm: float = 80.0
    steps_per_beat: int = DEFAULT_STEPS_PER_BEAT
    gate: float = DEFAULT_GATE
    default_steps: int = DEFAULT_STEPS
    min_steps: int = MIN_STEPS
    max_steps: int = MAX_STEPS

    def __post_init__(self) -> None:
        if self.bpm <= 0:
            msg = f"bpm must be positive, got {self.bpm}"
            raise ValueError(msg)
        if self.steps_per_beat < 1:
            msg = f"steps_per_beat must be at least 1, got {self.steps_per_beat}"
            raise ValueError(msg)
        if not 0 < self.gate <= 1:
            msg = f"gate must be in (0, 1], got {self.gate}"
            raise ValueError(msg)
        if not 1 <= self.min_steps <= self.max_steps:
            msg = (
                f"Invalid step bounds: min_steps={self.min_steps}, "
                f"max_steps={self.max_steps}"
            )
            raise ValueError(msg)
        if not self.min_steps <= self.default_steps <= self.max_steps:
            msg = (
                f"default_steps must be within [{self.min_steps}, {self.max_steps}], "
                f"got {self.default_steps}"
            )
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _flatten(data: dict[str, Any]) -> dict[str, Any]:
    """Lift ``playback``/``editor`` sections to top-level keys."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if key in SECTIONS:
            if not isinstance(value, dict):
                msg = f"Config section '{key}' must be a mapping"
                raise ValueError(msg)
            for sub_key, sub_value in value.items():
                if sub_key not in SECTIONS[key]:
                    msg = f"Unknown setting '{key}.{sub_key}'"
                    raise ValueError(msg)
                flat[sub_key] = sub_value
        else:
            flat[key] = value
    return flat


def settings_from_dict(data: dict[str, Any], base: Settings | None = None) -> Settings:
    """Build settings from a (possibly sectioned) mapping over ``base``.

    Raises
    ------
    ValueError
        If a key is unknown or a value has the wrong type or range.
    """
    base = base or Settings()
    known = {f.name for f in fields(Settings)}
    updates: dict[str, Any] = {}

    for key, value in _flatten(data).items():
        if key not in known:
            msg = f"Unknown setting '{key}'"
            raise ValueError(msg)
        default = getattr(base, key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            msg = f"Setting '{key}' must be a number, got {value!r}"
            raise ValueError(msg)
        if isinstance(default, int):
            if isinstance(value, float) and not value.is_integer():
                msg = f"Setting '{key}' must be an integer, got {value!r}"
                raise ValueError(msg)
            value = int(value)
        updates[key] = value

    return replace(base, **updates)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML.

    Parameters
    ----------
    path : str | Path | None, optional
        Config file to read. When omitted, the user config at
        ``~/.config/tab-piano/config.yaml`` is used if it exists.

    Returns
    -------
    Settings
        Defaults overridden by the file's values.

    Raises
    ------
    FileNotFoundError
        If an explicit path does not exist.
    ValueError
        If the file is not a mapping or holds invalid settings.
    """
    if path is None:
        config_path = USER_CONFIG_PATH
        if not config_path.exists():
            return Settings()
    else:
        config_path = Path(path)
        if not config_path.exists():
            msg = f"Config file not found: {config_path}"
            raise FileNotFoundError(msg)

    logger.debug("Loading settings from %s", config_path)
    data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {config_path}"
        raise ValueError(msg)
    return settings_from_dict(data)
