"""Type-safe domain enums for output formats, deployment targets, and TLS modes."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Example:
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class DeployTarget(str, Enum):
    """Configuration deployment target layers.

    Attributes:
        APP: System-wide application configuration (requires privileges).
        HOST: System-wide host-specific configuration (requires privileges).
        USER: User-specific configuration (~/.config on Linux).
    """

    APP = "app"
    HOST = "host"
    USER = "user"


class TlsMode(str, Enum):
    """How the SMTP connection gets encrypted.

    Attributes:
        IMPLICIT: The socket is TLS from the first byte (typically port 465).
        STARTTLS: Plaintext socket upgraded in place after the first EHLO
            (typically port 587).

    Example:
        >>> TlsMode.IMPLICIT.default_port
        465
        >>> TlsMode.STARTTLS.default_port
        587
    """

    IMPLICIT = "implicit"
    STARTTLS = "starttls"

    @property
    def default_port(self) -> int:
        return 465 if self is TlsMode.IMPLICIT else 587


__all__ = [
    "DeployTarget",
    "OutputFormat",
    "TlsMode",
]
