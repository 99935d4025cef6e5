"""SMTP configuration model and loaders.

Provides the SmtpConfig Pydantic model threaded explicitly into the sender,
plus loaders that build it from the layered configuration ``[smtp]`` section
and from the ``SMTP_*`` / ``CONTACT_*`` environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, cast

from btx_lib_mail import validate_email_address
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from scholarsite_mail.domain.enums import TlsMode
from scholarsite_mail.domain.errors import ConfigurationError, InvalidRecipientError

DEFAULT_RECIPIENT = "info@scholar.name"
DEFAULT_FROM_NAME = "ScholarSite"

#: Environment variable name -> SmtpConfig field name.
ENV_FIELD_MAP: dict[str, str] = {
    "SMTP_HOST": "host",
    "SMTP_PORT": "port",
    "SMTP_USER": "username",
    "SMTP_PASS": "password",
    "SMTP_SECURE": "secure",
    "CONTACT_RECIPIENT": "recipient",
    "CONTACT_FROM_EMAIL": "from_address",
}


def _validate_address(name: str, address: str) -> None:
    """Raise InvalidRecipientError when ``address`` is not a usable mailbox."""
    try:
        validate_email_address(address)
    except ValueError as exc:
        raise InvalidRecipientError(f"Invalid {name}: {address}") from exc


class SmtpConfig(BaseModel):
    """Validated, immutable SMTP settings for one mail sender.

    ``host``, ``username`` and ``password`` may be absent at construction time;
    :meth:`require_credentials` enforces them right before a send.

    Example:
        >>> config = SmtpConfig(host="smtp.example.com", username="bot@example.com", password="s3cret")
        >>> config.resolved_port
        465
        >>> config.resolved_from_address
        'bot@example.com'
        >>> SmtpConfig(secure=False).resolved_port
        587
    """

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    port: int | None = None
    username: str | None = None
    password: str | None = None
    secure: bool = True
    recipient: str = DEFAULT_RECIPIENT
    from_address: str | None = None
    from_name: str = DEFAULT_FROM_NAME
    ehlo_name: str | None = None
    timeout: float | None = None

    @field_validator("host", "username", "password", "from_address", "ehlo_name", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: Any) -> Any:
        """Treat empty or whitespace-only strings as "not configured"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("recipient", mode="before")
    @classmethod
    def _default_blank_recipient(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_RECIPIENT
        return v

    @field_validator("port", mode="before")
    @classmethod
    def _coerce_blank_port(cls, v: Any) -> Any:
        """Blank strings and 0 mean "use the default port for the TLS mode"."""
        if isinstance(v, str) and not v.strip():
            return None
        if v == 0 or v == "0":
            return None
        return v

    @field_validator("secure", mode="before")
    @classmethod
    def _parse_secure_flag(cls, v: Any) -> Any:
        """Only the literal string ``false`` disables implicit TLS.

        Examples:
            >>> SmtpConfig._parse_secure_flag("FALSE")
            False
            >>> SmtpConfig._parse_secure_flag("0")
            True
            >>> SmtpConfig._parse_secure_flag(False)
            False
        """
        if isinstance(v, str):
            return v.strip().lower() != "false"
        return v

    @model_validator(mode="after")
    def _validate_config(self) -> SmtpConfig:
        """Reject values that would only fail later on the wire."""
        if self.port is not None and not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        _validate_address("recipient", self.recipient)
        if self.from_address is not None:
            _validate_address("from_address", self.from_address)
        return self

    @property
    def tls_mode(self) -> TlsMode:
        return TlsMode.IMPLICIT if self.secure else TlsMode.STARTTLS

    @property
    def resolved_port(self) -> int:
        return self.port if self.port is not None else self.tls_mode.default_port

    @property
    def resolved_from_address(self) -> str:
        """From address, falling back to the SMTP username, then the recipient."""
        return self.from_address or self.username or self.recipient

    @property
    def resolved_ehlo_name(self) -> str:
        return self.ehlo_name or self.host or "localhost"

    def require_credentials(self) -> None:
        """Ensure host, username and password are all present.

        Raises:
            ConfigurationError: Naming every missing setting.

        Example:
            >>> SmtpConfig(host="smtp.example.com").require_credentials()  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ConfigurationError: SMTP configuration incomplete: missing username, password
        """
        missing = [name for name in ("host", "username", "password") if getattr(self, name) is None]
        if missing:
            raise ConfigurationError(f"SMTP configuration incomplete: missing {', '.join(missing)}")

    def __repr__(self) -> str:
        """Return string representation with the password redacted.

        Example:
            >>> "s3cret" in repr(SmtpConfig(password="s3cret"))
            False
        """
        fields: list[str] = []
        for name, value in self:
            if name == "password" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"SmtpConfig({', '.join(fields)})"


def _env_overrides(environ: Mapping[str, str] | None) -> dict[str, str]:
    """Collect the SMTP/CONTACT variables that are set in ``environ``."""
    source = os.environ if environ is None else environ
    return {field: source[name] for name, field in ENV_FIELD_MAP.items() if name in source}


def load_smtp_config_from_env(environ: Mapping[str, str] | None = None) -> SmtpConfig:
    """Build SmtpConfig from ``SMTP_*`` and ``CONTACT_*`` environment variables.

    Variables are read on every call; nothing is cached.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Example:
        >>> config = load_smtp_config_from_env({"SMTP_HOST": "mail.example.com", "SMTP_SECURE": "false"})
        >>> (config.host, config.resolved_port)
        ('mail.example.com', 587)
    """
    return SmtpConfig.model_validate(_env_overrides(environ))


def load_smtp_config_from_dict(
    config_dict: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> SmtpConfig:
    """Load SmtpConfig from the ``[smtp]`` section of a configuration dictionary.

    Bridges lib_layered_config's dictionary output with the typed SmtpConfig
    model. Environment variables listed in :data:`ENV_FIELD_MAP` take
    precedence over the file layers.

    Args:
        config_dict: Configuration dictionary typically from lib_layered_config.
        environ: Mapping to read overriding variables from. Defaults to ``os.environ``.

    Example:
        >>> config = load_smtp_config_from_dict({"smtp": {"host": "smtp.example.com", "port": 2525}}, environ={})
        >>> config.resolved_port
        2525
    """
    section: Any = config_dict.get("smtp", {})
    if not isinstance(section, Mapping):
        return SmtpConfig.model_validate(section)

    raw: dict[str, Any] = dict(cast(Mapping[str, Any], section))
    raw.update(_env_overrides(environ))
    return SmtpConfig.model_validate(raw)


__all__ = [
    "DEFAULT_FROM_NAME",
    "DEFAULT_RECIPIENT",
    "ENV_FIELD_MAP",
    "SmtpConfig",
    "load_smtp_config_from_dict",
    "load_smtp_config_from_env",
]
