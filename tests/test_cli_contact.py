"""CLI send-contact stories: delivery, SMTP overrides and exit codes."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pytest
from click.testing import CliRunner, Result

from scholarsite_mail.adapters import cli as cli_mod
from scholarsite_mail.adapters.cli.commands.contact import (
    apply_validated_overrides,
    filter_unset,
    sanitize_exception_message,
)
from scholarsite_mail.adapters.smtp.config import SmtpConfig
from scholarsite_mail.domain.errors import DeliveryError, SmtpProtocolError

if TYPE_CHECKING:
    from conftest import ContactCliContext

COMPLETE_SMTP = {
    "host": "smtp.test.com",
    "username": "bot@test.com",
    "password": "s3cret",
}

INQUIRY_ARGS = [
    "send-contact",
    "--full-name",
    "Jane Doe",
    "--email",
    "jane@uni.edu",
    "--plan-interest",
    "pro",
    "--biography",
    "ML researcher",
]


def _invoke(cli_runner: CliRunner, ctx: ContactCliContext, *extra: str) -> Result:
    return cli_runner.invoke(cli_mod.cli, [*INQUIRY_ARGS, *extra], obj=ctx.factory)


# ======================== Successful sends ========================


@pytest.mark.os_agnostic
def test_send_contact_with_complete_config_reports_id(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)

    result = _invoke(cli_runner, ctx)

    assert result.exit_code == 0, result.output
    assert "Contact inquiry sent to info@scholar.name (id: smtp-1)" in result.output
    inquiry = ctx.spy.sent[0]["inquiry"]
    assert (inquiry.full_name, inquiry.email, inquiry.plan_interest) == ("Jane Doe", "jane@uni.edu", "pro")


@pytest.mark.os_agnostic
def test_send_contact_passes_optional_fields(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)

    result = _invoke(
        cli_runner,
        ctx,
        "--institution",
        "MIT",
        "--role",
        "PI",
        "--research-field",
        "Robotics",
        "--openalex-id",
        "A5023888391",
        "--estimated-profiles",
        "12",
    )

    assert result.exit_code == 0, result.output
    inquiry = ctx.spy.sent[0]["inquiry"]
    assert inquiry.institution == "MIT"
    assert inquiry.role == "PI"
    assert inquiry.research_field == "Robotics"
    assert inquiry.openalex_id == "A5023888391"
    assert inquiry.estimated_profiles == "12"


@pytest.mark.os_agnostic
def test_smtp_options_override_configured_values(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)

    result = _invoke(
        cli_runner,
        ctx,
        "--smtp-host",
        "relay.test.com",
        "--smtp-port",
        "2525",
        "--starttls",
        "--to",
        "team@scholar.name",
        "--timeout",
        "7.5",
    )

    assert result.exit_code == 0, result.output
    config: SmtpConfig = ctx.spy.sent[0]["config"]
    assert config.host == "relay.test.com"
    assert config.resolved_port == 2525
    assert config.secure is False
    assert config.recipient == "team@scholar.name"
    assert config.timeout == 7.5
    assert config.username == "bot@test.com"


@pytest.mark.os_agnostic
def test_credentials_can_come_entirely_from_options(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context({})

    result = _invoke(
        cli_runner, ctx, "--smtp-host", "smtp.test.com", "--smtp-user", "bot@test.com", "--smtp-pass", "pw"
    )

    assert result.exit_code == 0, result.output
    assert ctx.spy.sent[0]["config"].password == "pw"


@pytest.mark.os_agnostic
def test_root_set_override_feeds_smtp_section(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)

    result = cli_runner.invoke(cli_mod.cli, ["--set", "smtp.port=2525", *INQUIRY_ARGS], obj=ctx.factory)

    assert result.exit_code == 0, result.output
    assert ctx.spy.sent[0]["config"].port == 2525


# ======================== Exit codes ========================


@pytest.mark.os_agnostic
def test_missing_credentials_exit_with_config_error(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context({"host": "smtp.test.com"})

    result = _invoke(cli_runner, ctx)

    assert result.exit_code == 78
    assert "missing username, password" in result.output
    assert ctx.spy.sent == []


@pytest.mark.os_agnostic
def test_protocol_rejection_exits_with_smtp_failure(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)
    ctx.spy.raise_exception = SmtpProtocolError(
        step="MAIL FROM", code=550, expected=(250,), line="550 5.7.1 Relaying denied"
    )

    result = _invoke(cli_runner, ctx)

    assert result.exit_code == 69
    assert "550 5.7.1 Relaying denied" in result.output


@pytest.mark.os_agnostic
def test_timeout_exits_with_timeout_code(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)
    ctx.spy.raise_exception = TimeoutError("timed out")

    assert _invoke(cli_runner, ctx).exit_code == 110


@pytest.mark.os_agnostic
def test_connection_failure_exits_with_transport_failure(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)
    ctx.spy.raise_exception = ConnectionRefusedError("Connection refused")

    result = _invoke(cli_runner, ctx)

    assert result.exit_code == 74
    assert "Connection refused" in result.output


@pytest.mark.os_agnostic
def test_invalid_recipient_option_exits_with_invalid_argument(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)

    result = _invoke(cli_runner, ctx, "--to", "not-an-email")

    assert result.exit_code == 22
    assert ctx.spy.sent == []


@pytest.mark.os_agnostic
def test_invalid_configured_port_exits_with_config_error(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context({**COMPLETE_SMTP, "port": 70000})

    assert _invoke(cli_runner, ctx).exit_code == 78


@pytest.mark.os_agnostic
def test_missing_required_inquiry_option_is_a_usage_error(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)

    result = cli_runner.invoke(cli_mod.cli, ["send-contact", "--full-name", "Jane Doe"], obj=ctx.factory)

    assert result.exit_code == 2
    assert ctx.spy.sent == []


@pytest.mark.os_agnostic
def test_delivery_error_output_never_echoes_password_messages(
    cli_runner: CliRunner,
    contact_cli_context: Callable[[dict[str, Any]], ContactCliContext],
) -> None:
    ctx = contact_cli_context(COMPLETE_SMTP)
    ctx.spy.raise_exception = DeliveryError("535 authentication failed for password s3cret")

    result = _invoke(cli_runner, ctx)

    assert result.exit_code == 69
    assert "s3cret" not in result.output


# ======================== Helpers ========================


@pytest.mark.os_agnostic
def test_filter_unset_drops_only_none() -> None:
    assert filter_unset(host=None, port=0, secure=False) == {"port": 0, "secure": False}


@pytest.mark.os_agnostic
def test_apply_validated_overrides_without_changes_returns_same_object() -> None:
    base = SmtpConfig(host="smtp.test.com")

    assert apply_validated_overrides(base, {}) is base


@pytest.mark.os_agnostic
def test_sanitize_keeps_harmless_messages() -> None:
    assert sanitize_exception_message(OSError("Network is unreachable")) == "Network is unreachable"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("keyword", ["password", "Credential", "SECRET", "token"])
def test_sanitize_hides_messages_with_sensitive_keywords(keyword: str) -> None:
    assert sanitize_exception_message(RuntimeError(f"leaked {keyword} here")) == (
        "Email delivery failed. Check SMTP configuration."
    )
