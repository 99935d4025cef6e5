"""Application ports: callable Protocol definitions for adapter functions.

Each Protocol class defines a ``__call__`` method whose signature matches the
corresponding adapter function, so plain module-level functions satisfy them
via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``SmtpConfig``) are imported under ``TYPE_CHECKING`` only.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.enums import DeployTarget, OutputFormat
from ..domain.inquiry import ContactInquiry

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.smtp.config import SmtpConfig
    from ..adapters.smtp.sender import SendResult


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class GetDefaultConfigPath(Protocol):
    """Return the path to the bundled default configuration file."""

    def __call__(self) -> Path: ...


class DeployConfiguration(Protocol):
    """Deploy default configuration to specified target layers."""

    def __call__(
        self,
        *,
        targets: Sequence[DeployTarget],
        force: bool = ...,
        profile: str | None = ...,
    ) -> list[Path]: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class SendContactEmail(Protocol):
    """Deliver one contact inquiry and return its local correlation id."""

    def __call__(self, inquiry: ContactInquiry, *, config: SmtpConfig) -> SendResult: ...


class LoadSmtpConfigFromDict(Protocol):
    """Load SmtpConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> SmtpConfig: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "DeployConfiguration",
    "DisplayConfig",
    "GetConfig",
    "GetDefaultConfigPath",
    "InitLogging",
    "LoadSmtpConfigFromDict",
    "SendContactEmail",
]
