"""SmtpConfig model: defaults, validation, TLS mode and the env/dict loaders."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from scholarsite_mail.adapters.smtp.config import (
    DEFAULT_RECIPIENT,
    SmtpConfig,
    load_smtp_config_from_dict,
    load_smtp_config_from_env,
)
from scholarsite_mail.domain.enums import TlsMode
from scholarsite_mail.domain.errors import ConfigurationError

COMPLETE_ENV = {
    "SMTP_HOST": "smtp.example.com",
    "SMTP_USER": "bot@example.com",
    "SMTP_PASS": "s3cret",
}

# ======================== Defaults ========================


@pytest.mark.os_agnostic
def test_defaults_use_implicit_tls_on_port_465() -> None:
    config = SmtpConfig()

    assert config.secure is True
    assert config.tls_mode is TlsMode.IMPLICIT
    assert config.resolved_port == 465


@pytest.mark.os_agnostic
def test_insecure_flag_selects_starttls_on_port_587() -> None:
    config = SmtpConfig(secure=False)

    assert config.tls_mode is TlsMode.STARTTLS
    assert config.resolved_port == 587


@pytest.mark.os_agnostic
def test_explicit_port_wins_over_mode_default() -> None:
    assert SmtpConfig(port=2525, secure=False).resolved_port == 2525


@pytest.mark.os_agnostic
def test_recipient_defaults_to_scholar_info_mailbox() -> None:
    assert SmtpConfig().recipient == DEFAULT_RECIPIENT == "info@scholar.name"


@pytest.mark.os_agnostic
def test_from_address_falls_back_to_username_then_recipient() -> None:
    assert SmtpConfig(from_address="web@scholar.name", username="bot@scholar.name").resolved_from_address == (
        "web@scholar.name"
    )
    assert SmtpConfig(username="bot@scholar.name").resolved_from_address == "bot@scholar.name"
    assert SmtpConfig().resolved_from_address == "info@scholar.name"


@pytest.mark.os_agnostic
def test_ehlo_name_falls_back_to_host() -> None:
    assert SmtpConfig(host="smtp.example.com").resolved_ehlo_name == "smtp.example.com"
    assert SmtpConfig(host="smtp.example.com", ehlo_name="web01").resolved_ehlo_name == "web01"
    assert SmtpConfig().resolved_ehlo_name == "localhost"


# ======================== Coercion and validation ========================


@pytest.mark.os_agnostic
def test_blank_strings_mean_not_configured() -> None:
    config = SmtpConfig(host="  ", username="", password="", from_address="", recipient="")

    assert config.host is None
    assert config.username is None
    assert config.password is None
    assert config.from_address is None
    assert config.recipient == DEFAULT_RECIPIENT


@pytest.mark.os_agnostic
@pytest.mark.parametrize("raw", ["", "0", 0])
def test_blank_or_zero_port_means_default(raw: object) -> None:
    assert SmtpConfig(port=raw).port is None  # type: ignore[arg-type]


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("raw", "expected"),
    [("false", False), (" FALSE ", False), ("true", True), ("0", True), ("no", True), ("", True)],
)
def test_only_literal_false_disables_implicit_tls(raw: str, expected: bool) -> None:
    assert SmtpConfig(secure=raw).secure is expected  # type: ignore[arg-type]


@pytest.mark.os_agnostic
@pytest.mark.parametrize("port", [-1, 65536, 100000])
def test_out_of_range_port_is_rejected(port: int) -> None:
    with pytest.raises(ValidationError, match="port must be 1-65535"):
        SmtpConfig(port=port)


@pytest.mark.os_agnostic
def test_non_positive_timeout_is_rejected() -> None:
    with pytest.raises(ValidationError, match="timeout must be positive"):
        SmtpConfig(timeout=0)


@pytest.mark.os_agnostic
def test_invalid_recipient_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Invalid recipient"):
        SmtpConfig(recipient="not-an-email")


@pytest.mark.os_agnostic
def test_invalid_from_address_is_rejected() -> None:
    with pytest.raises(ValidationError, match="Invalid from_address"):
        SmtpConfig(from_address="nope")


@pytest.mark.os_agnostic
def test_config_is_frozen() -> None:
    config = SmtpConfig()
    with pytest.raises(ValidationError):
        config.host = "smtp.example.com"  # type: ignore[misc]


@pytest.mark.os_agnostic
def test_repr_redacts_password() -> None:
    text = repr(SmtpConfig(host="smtp.example.com", password="hunter2"))

    assert "hunter2" not in text
    assert "[REDACTED]" in text
    assert "smtp.example.com" in text


# ======================== Credential precondition ========================


@pytest.mark.os_agnostic
def test_require_credentials_passes_when_complete() -> None:
    SmtpConfig(host="smtp.example.com", username="bot@example.com", password="pw").require_credentials()


@pytest.mark.os_agnostic
def test_require_credentials_names_every_missing_setting() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        SmtpConfig().require_credentials()

    assert str(excinfo.value) == "SMTP configuration incomplete: missing host, username, password"


@pytest.mark.os_agnostic
def test_require_credentials_names_only_the_missing_password() -> None:
    with pytest.raises(ConfigurationError, match="missing password$"):
        SmtpConfig(host="smtp.example.com", username="bot@example.com").require_credentials()


# ======================== Environment loader ========================


@pytest.mark.os_agnostic
def test_env_loader_maps_every_variable() -> None:
    config = load_smtp_config_from_env(
        {
            **COMPLETE_ENV,
            "SMTP_PORT": "2525",
            "SMTP_SECURE": "false",
            "CONTACT_RECIPIENT": "team@scholar.name",
            "CONTACT_FROM_EMAIL": "web@scholar.name",
        }
    )

    assert config.host == "smtp.example.com"
    assert config.port == 2525
    assert config.username == "bot@example.com"
    assert config.password == "s3cret"
    assert config.secure is False
    assert config.recipient == "team@scholar.name"
    assert config.from_address == "web@scholar.name"


@pytest.mark.os_agnostic
def test_env_loader_ignores_unrelated_variables() -> None:
    config = load_smtp_config_from_env({"HOME": "/root", "SMTP_HOSTNAME": "ignored"})

    assert config.host is None


@pytest.mark.os_agnostic
def test_env_loader_reads_process_environment_on_each_call(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SMTP_HOST", "first.example.com")
    assert load_smtp_config_from_env().host == "first.example.com"

    monkeypatch.setenv("SMTP_HOST", "second.example.com")
    assert load_smtp_config_from_env().host == "second.example.com"


# ======================== Dict loader ========================


@pytest.mark.os_agnostic
def test_dict_loader_reads_smtp_section() -> None:
    config = load_smtp_config_from_dict(
        {"smtp": {"host": "smtp.example.com", "port": 2525, "secure": False, "timeout": 12.5}},
        environ={},
    )

    assert config.host == "smtp.example.com"
    assert config.resolved_port == 2525
    assert config.tls_mode is TlsMode.STARTTLS
    assert config.timeout == 12.5


@pytest.mark.os_agnostic
def test_dict_loader_without_section_yields_defaults() -> None:
    assert load_smtp_config_from_dict({}, environ={}) == SmtpConfig()


@pytest.mark.os_agnostic
def test_environment_overrides_file_layers() -> None:
    config = load_smtp_config_from_dict(
        {"smtp": {"host": "file.example.com", "username": "file@example.com"}},
        environ={"SMTP_HOST": "env.example.com"},
    )

    assert config.host == "env.example.com"
    assert config.username == "file@example.com"
