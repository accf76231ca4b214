from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from lagoon.lagoon_datatypes import ConfigError
from lagoon.lagoon_serialize import deserialize, detect_format

MEMBERSHIP_FALLBACKS = ("error", "false")

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("", "0", "false", "no", "off")


def _dbg(*parts, enabled: Optional[bool] = None):
    """Debug trace to stderr. Enabled explicitly or through LAGOON_DEBUG."""
    if enabled or (enabled is None and os.environ.get("LAGOON_DEBUG")):
        print("[DBG]", *parts, file=sys.stderr)


def _to_flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        s = value.strip().lower()
        if s in _TRUE_STRINGS:
            return True
        if s in _FALSE_STRINGS:
            return False
    raise ConfigError(f"Invalid boolean for '{name}': {value!r}")


@dataclass
class RuntimeConfig:
    """Settings for a Lagoon Runtime."""
    debug: bool = False
    # What `in` does when neither operand shape matches: raise, or answer false
    membership_fallback: str = "error"
    install_extensions: bool = True

    def __post_init__(self):
        self.debug = _to_flag("debug", self.debug)
        self.install_extensions = _to_flag("install_extensions", self.install_extensions)
        fallback = str(self.membership_fallback).strip().lower()
        if fallback not in MEMBERSHIP_FALLBACKS:
            raise ConfigError(
                f"membership_fallback must be one of {', '.join(MEMBERSHIP_FALLBACKS)}, got {self.membership_fallback!r}"
            )
        self.membership_fallback = fallback

    @classmethod
    def from_mapping(cls, data: Any) -> 'RuntimeConfig':
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")
        # Accept a [lagoon] table / lagoon: section as well as top-level keys
        if set(data.keys()) == {"lagoon"} and isinstance(data["lagoon"], dict):
            data = data["lagoon"]
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise ConfigError(f"Unknown configuration key: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> 'RuntimeConfig':
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if "LAGOON_DEBUG" in env:
            kwargs["debug"] = env["LAGOON_DEBUG"]
        if "LAGOON_MEMBERSHIP_FALLBACK" in env:
            kwargs["membership_fallback"] = env["LAGOON_MEMBERSHIP_FALLBACK"]
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> 'RuntimeConfig':
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {p}") from e
        fmt = detect_format(filename=p.name, data_hint=text)
        if fmt is None:
            raise ConfigError(f"Cannot tell the format of configuration file: {p}")
        data = deserialize(text, fmt=fmt)
        if isinstance(data, str) and text.strip():
            raise ConfigError(f"Could not parse {fmt} configuration file: {p}")
        return cls.from_mapping(data)
