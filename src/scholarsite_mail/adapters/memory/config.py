"""In-memory configuration adapters for testing.

Satisfy the same Protocols as the production configuration adapters without
touching the filesystem or lib_layered_config's discovery.
"""

from __future__ import annotations

import tempfile
from collections.abc import Sequence
from pathlib import Path

from lib_layered_config import Config

from ...domain.enums import DeployTarget, OutputFormat

_SMTP_DEFAULTS = {"recipient": "info@scholar.name", "secure": True, "from_name": "ScholarSite"}


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return a Config holding only the bundled SMTP defaults (no credentials)."""
    return Config({"smtp": dict(_SMTP_DEFAULTS)}, {})


def get_default_config_path_in_memory() -> Path:
    """Return a synthetic path (not a real file)."""
    return Path(tempfile.gettempdir()) / "scholarsite-mail" / "defaultconfig.toml"


def deploy_configuration_in_memory(
    *,
    targets: Sequence[DeployTarget],
    force: bool = False,
    profile: str | None = None,
) -> list[Path]:
    """Pretend to deploy; nothing is written."""
    return []


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """No-op display -- satisfies the DisplayConfig protocol."""


__all__ = [
    "deploy_configuration_in_memory",
    "display_config_in_memory",
    "get_config_in_memory",
    "get_default_config_path_in_memory",
]
