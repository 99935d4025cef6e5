"""Parse and apply ``--set SECTION.KEY=VALUE`` CLI overrides to Config."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""Union of types that :func:`coerce_value` can produce."""


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """A single parsed configuration override."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue


def parse_override(raw: str) -> ConfigOverride:
    """Split ``SECTION.KEY[.SUBKEY...]=VALUE`` into a ConfigOverride.

    The first ``=`` separates the dotted path from the value; the first dot
    separates the section from the key path.

    Raises:
        ValueError: Missing ``=``, no dot in the key, or an empty component.

    Examples:
        >>> override = parse_override("smtp.port=2525")
        >>> (override.section, override.key_path, override.value)
        ('smtp', ('port',), 2525)
        >>> parse_override("smtp.secure=false").value
        False
    """
    if "=" not in raw:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")

    path_part, value_str = raw.split("=", maxsplit=1)
    if "." not in path_part:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")

    section, *key_parts = path_part.split(".")
    if not section:
        raise ValueError(f"Invalid override {raw!r}: section name is empty")
    if not all(key_parts):
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")

    return ConfigOverride(section=section, key_path=tuple(key_parts), value=coerce_value(value_str))


def coerce_value(raw: str) -> CoercedValue:
    """Parse ``raw`` as JSON, falling back to the string itself.

    Examples:
        >>> coerce_value("true")
        True
        >>> coerce_value("30.5")
        30.5
        >>> coerce_value("smtp.example.com")
        'smtp.example.com'
        >>> coerce_value("")
        ''
    """
    if raw == "":
        return ""
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return raw


def _nest_override(target: dict[str, dict[str, object]], override: ConfigOverride) -> None:
    """Place ``override.value`` at its key path inside ``target``, creating dicts as needed."""
    node: dict[str, object] = target.setdefault(override.section, {})
    for part in override.key_path[:-1]:
        existing = node.setdefault(part, {})
        if not isinstance(existing, dict):
            raise TypeError(f"Expected dict at key {part!r}, got {type(existing).__name__}")
        node = cast("dict[str, object]", existing)
    node[override.key_path[-1]] = override.value


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Deep-merge ``--set`` overrides into a Config.

    Returns the original Config untouched when there are no overrides.

    Raises:
        ValueError: If any override string is malformed.
    """
    if not raw_overrides:
        return config

    overrides: dict[str, dict[str, object]] = {}
    for raw in raw_overrides:
        _nest_override(overrides, parse_override(raw))
    return config.with_overrides(overrides)


__all__ = [
    "CoercedValue",
    "ConfigOverride",
    "apply_overrides",
    "coerce_value",
    "parse_override",
]
