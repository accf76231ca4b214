from __future__ import annotations

import json
import re
import tomllib
from pathlib import PurePath
from typing import Any, Optional
import collections.abc

import yaml

from lagoon.lagoon_datatypes import StructInstance

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
}

# '[section]' headers and 'key = value' lines
_TOML_TABLE = re.compile(r'^\[\[?[A-Za-z0-9_.\-]+\]\]?$')
_TOML_KEY = re.compile(r'^[A-Za-z0-9_\-]+\s*=')


# --------------------------
# Helpers
# --------------------------

def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        return data.decode(encoding or 'utf-8', errors='replace')
    if isinstance(data, str):
        return data
    return str(data)


def _to_builtin(obj: Any) -> Any:
    # Runtime values (struct instances, mappings) down to plain dict/list/scalars
    if isinstance(obj, list):
        return [_to_builtin(x) for x in obj]
    if isinstance(obj, StructInstance):
        return {k: _to_builtin(v) for k, v in obj.fields.items()}
    if isinstance(obj, collections.abc.Mapping):
        return {k: _to_builtin(v) for k, v in obj.items()}
    return obj


def detect_format(content_type: Optional[str] = None,
                  data_hint: Optional[str] = None,
                  filename: Optional[str] = None) -> Optional[str]:
    """
    Returns a canonical format name among: 'json', 'yaml', 'toml'.
    Uses the file suffix, then the content type, then simple data sniffing.
    """
    if filename:
        fmt = _SUFFIX_FORMATS.get(PurePath(filename).suffix.lower())
        if fmt:
            return fmt

    ct = (content_type or "").lower()
    if 'json' in ct:
        return 'json'
    if 'yaml' in ct:
        return 'yaml'
    if 'toml' in ct:
        return 'toml'

    if data_hint is not None:
        s = data_hint.lstrip()
        first = s.splitlines()[0].strip() if s else ""
        if _TOML_TABLE.match(first) or _TOML_KEY.match(first):
            return 'toml'
        if s.startswith('{') or s.startswith('['):
            return 'json'
        if ':' in first or s.startswith('---'):
            return 'yaml'
    return None


# --------------------------
# Public API
# --------------------------

def deserialize(data: bytes | bytearray | str,
                *,
                content_type: Optional[str] = None,
                fmt: Optional[str] = None) -> Any:
    """
    Convert text (or bytes) to native Python structures.
    Supported fmt: 'json', 'yaml', 'toml'.
    If fmt is None, uses content_type, then sniffing.
    Returns the raw text when the format is unknown or the text does not parse.
    """
    text = _norm_text(data)
    f = (fmt or detect_format(content_type, text))
    if f == 'json':
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # YAML is a superset of JSON; try it before giving up
            try:
                return yaml.safe_load(text)
            except yaml.YAMLError:
                return text
    if f == 'yaml':
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError:
            return text
    if f == 'toml':
        try:
            return tomllib.loads(text)
        except tomllib.TOMLDecodeError:
            return text
    return text


def serialize(value: Any,
              *,
              fmt: str,
              pretty: bool = True) -> str:
    """
    Convert a runtime value into a textual representation.
    - fmt: 'json' | 'yaml'
    """
    f = (fmt or '').lower()
    built = _to_builtin(value)
    if f == 'json':
        return json.dumps(built, ensure_ascii=False, indent=2 if pretty else None)
    if f == 'yaml':
        return yaml.safe_dump(built, sort_keys=False)
    if f == 'toml':
        raise ValueError("TOML serialization is not supported (tomllib is read-only)")
    raise ValueError(f"Unsupported serialization format: {fmt!r}")


__all__ = [
    "deserialize",
    "serialize",
    "detect_format",
]
