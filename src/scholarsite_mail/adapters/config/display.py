"""Display configuration through lib_layered_config's Rich renderer."""

from __future__ import annotations

from collections.abc import Mapping

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console

from scholarsite_mail.domain.enums import OutputFormat

_REDACTED_KEYS = frozenset({"password"})


def _redact_secrets(config: Config) -> Config:
    """Return a Config whose ``[smtp]`` password is masked when set."""
    smtp_section = config.get("smtp", default={})
    if not isinstance(smtp_section, Mapping):
        return config
    masked = {key: "[REDACTED]" for key in _REDACTED_KEYS if smtp_section.get(key)}
    if not masked:
        return config
    return config.with_overrides({"smtp": masked})


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Print the merged configuration with the SMTP password redacted.

    Pending log output is flushed first so it does not interleave with the
    configuration dump.

    Args:
        config: Loaded layered configuration.
        output_format: Human-readable TOML-like output or JSON.
        section: Only show this top-level section when given.
        console: Rich console to print to; defaults to stdout.
        profile: Profile name to mention in provenance comments.

    Raises:
        ValueError: If ``section`` does not exist.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    _lib_display(
        _redact_secrets(config),
        output_format=LibOutputFormat(output_format.value),
        section=section,
        profile=profile,
        console=console,
    )


__all__ = ["display_config"]
