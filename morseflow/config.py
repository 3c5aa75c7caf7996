"""
Configuration management for MorseFlow.

Default settings live in ``config_default_settings.json`` next to this
module.  They can be overridden by a user file whose path is given
explicitly or through the ``MORSEFLOW_CONFIG`` environment variable.
The two are merged recursively, user values winning.

Sections
--------
``morse``
    ``frequency`` (Hz) and ``speed`` (``"cc[:oo]"`` in WPM).
``audio``
    Tone device selection (``backend``, ``sample_rate``, ``blocksize``,
    ``device``) and keying envelope (``gain``, ``ramp_time_constant``).
``logging``
    ``level`` and ``file`` for the debug log.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULT_CONFIG_FILE: Path = Path(__file__).resolve().parent / "config_default_settings.json"


@dataclass
class AppConfig:
    """In-memory representation of the application configuration.

    Keys not known to MorseFlow are preserved in ``data``.
    """

    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, *keys: str, default: Optional[Any] = None) -> Any:
        """Retrieve a nested configuration value safely.

        Usage::

            config = load_config()
            gain = config.get("audio", "gain", default=0.1)

        :param keys: Sequence of keys describing a path in the config.
        :param default: Value returned when the path does not exist.
        :return: The configuration value or ``default``.
        """

        current: Any = self.data
        for key in keys:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def section(self, name: str) -> Dict[str, Any]:
        """Return a top-level section as a dictionary (empty if missing)."""
        value = self.data.get(name)
        return dict(value) if isinstance(value, dict) else {}

    def merge(self, other: Dict[str, Any]) -> None:
        """Merge another dictionary into this configuration.

        Values from ``other`` take precedence; nested dictionaries are
        merged recursively.
        """

        def _merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
            result = dict(a)
            for k, v in b.items():
                if isinstance(v, dict) and isinstance(a.get(k), dict):
                    result[k] = _merge(a[k], v)
                else:
                    result[k] = v
            return result

        self.data = _merge(self.data, other)


def load_config(user_config_path: Optional[os.PathLike] = None) -> AppConfig:
    """Load the default configuration and overlay a user file.

    A missing user file is ignored; only the defaults are used then.

    :param user_config_path: Path to an optional JSON override file.
    :return: A fully merged :class:`AppConfig`.
    """

    with open(DEFAULT_CONFIG_FILE, "r", encoding="utf-8") as f:
        base = json.load(f)
    cfg = AppConfig(base)
    if user_config_path:
        user_path = Path(user_config_path)
        if user_path.is_file():
            with open(user_path, "r", encoding="utf-8") as uf:
                overrides = json.load(uf)
            cfg.merge(overrides)
    return cfg


def get_app_config() -> AppConfig:
    """Load the configuration honouring ``MORSEFLOW_CONFIG``."""

    override_path = os.environ.get("MORSEFLOW_CONFIG")
    return load_config(override_path)


__all__ = ["AppConfig", "DEFAULT_CONFIG_FILE", "load_config", "get_app_config"]
