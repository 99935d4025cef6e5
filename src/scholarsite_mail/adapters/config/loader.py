"""Layered configuration loader with caching and profile support."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol, cast

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from scholarsite_mail import __init__conf__


class ConfigLoaderProtocol(Protocol):
    """Config loader callable that also exposes ``cache_clear``."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str) -> None:
    """Reject profile names that are empty, too long, or path-like.

    Raises:
        ValueError: If the profile name is invalid.

    Examples:
        >>> validate_profile("staging-v2")

        >>> validate_profile("../etc/passwd")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../etc/passwd
    """
    validate_profile_name(profile, max_length=DEFAULT_MAX_PROFILE_LENGTH)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Return the path to the bundled ``defaultconfig.toml``.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).parent / "defaultconfig.toml"


@lru_cache(maxsize=4)
def _read_config_cached(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Load layered configuration with application defaults.

    Precedence: defaults -> app -> host -> user -> dotenv -> env. Results are
    cached per ``(profile, start_dir)`` for the life of the process.

    Args:
        profile: Optional profile name; inserts ``profile/<name>/`` into every
            configuration path.
        start_dir: Directory that seeds ``.env`` discovery; defaults to the
            current working directory.

    Example:
        >>> config = get_config()
        >>> config.get("smtp.recipient")
        'info@scholar.name'
    """
    if profile is not None:
        validate_profile(profile)
    return _read_config_cached(profile=profile, start_dir=start_dir)


def _cache_clear() -> None:
    """Forget cached configuration so the next call re-reads every layer."""
    _read_config_cached.cache_clear()


_get_config.cache_clear = _cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


__all__ = [
    "ConfigLoaderProtocol",
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
