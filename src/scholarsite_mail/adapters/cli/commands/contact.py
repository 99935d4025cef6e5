"""Send-contact CLI command.

Builds a :class:`~scholarsite_mail.domain.inquiry.ContactInquiry` from options
and delivers it with the configured SMTP settings. Useful for checking SMTP
credentials from a shell and for feeding inquiries from scripts.

Exception to exit code mapping (most specific first):

1. ConfigurationError or an invalid [smtp] section -> CONFIG_ERROR (78)
2. Invalid option value (pydantic ValidationError) -> INVALID_ARGUMENT (22)
3. DeliveryError / SmtpProtocolError -> SMTP_FAILURE (69)
4. TimeoutError -> TIMEOUT (110)
5. OSError (refused, reset, TLS failure) -> TRANSPORT_FAILURE (74)
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

import lib_log_rich.runtime
import rich_click as click
from pydantic import ValidationError

from scholarsite_mail.adapters.smtp.config import SmtpConfig
from scholarsite_mail.domain.errors import ConfigurationError, DeliveryError
from scholarsite_mail.domain.inquiry import ContactInquiry

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)

# Keywords that may indicate sensitive data in exception messages
_SENSITIVE_KEYWORDS = frozenset({"password", "credential", "secret", "token"})


def sanitize_exception_message(exc: BaseException) -> str:
    """Replace messages that look like they carry credentials with a generic one.

    Examples:
        >>> sanitize_exception_message(ConnectionRefusedError("Connection refused"))
        'Connection refused'
        >>> sanitize_exception_message(RuntimeError("bad password for bot"))
        'Email delivery failed. Check SMTP configuration.'
    """
    message = str(exc)
    if any(keyword in message.lower() for keyword in _SENSITIVE_KEYWORDS):
        return "Email delivery failed. Check SMTP configuration."
    return message


def filter_unset(**kwargs: Any) -> dict[str, Any]:
    """Drop options the user did not pass (None).

    Example:
        >>> filter_unset(host="smtp.example.com", port=None)
        {'host': 'smtp.example.com'}
    """
    return {key: value for key, value in kwargs.items() if value is not None}


def apply_validated_overrides(base_config: SmtpConfig, overrides: dict[str, Any]) -> SmtpConfig:
    """Merge overrides into ``base_config`` and re-run every validator.

    Raises:
        ValidationError: When an override is invalid.
    """
    if not overrides:
        return base_config
    return SmtpConfig.model_validate({**base_config.model_dump(), **overrides})


def _fail(
    exc: BaseException,
    log_message: str,
    user_message: str,
    exit_code: ExitCode,
    *,
    sanitize: bool = True,
) -> NoReturn:
    detail = sanitize_exception_message(exc) if sanitize else str(exc)
    logger.error(log_message, extra={"error": detail, "error_type": type(exc).__name__})
    click.echo(f"\nError: {user_message} - {detail}", err=True)
    raise SystemExit(exit_code) from exc


def _load_smtp_config(cli_ctx: CLIContext, overrides: dict[str, Any]) -> SmtpConfig:
    try:
        base = cli_ctx.services.load_smtp_config_from_dict(cli_ctx.config.as_dict())
    except ValidationError as exc:
        _fail(exc, "Invalid SMTP configuration", "Invalid [smtp] configuration", ExitCode.CONFIG_ERROR)
    try:
        return apply_validated_overrides(base, overrides)
    except ValidationError as exc:
        _fail(exc, "Invalid SMTP option", "Invalid option value", ExitCode.INVALID_ARGUMENT)


def _deliver(cli_ctx: CLIContext, inquiry: ContactInquiry, smtp_config: SmtpConfig) -> str:
    try:
        result = cli_ctx.services.send_contact_email(inquiry, config=smtp_config)
    except ConfigurationError as exc:
        _fail(exc, "SMTP configuration error", "Configuration error", ExitCode.CONFIG_ERROR, sanitize=False)
    except DeliveryError as exc:
        _fail(exc, "SMTP delivery failed", "Server rejected the message", ExitCode.SMTP_FAILURE)
    except TimeoutError as exc:
        _fail(exc, "SMTP server timed out", "Timed out talking to SMTP server", ExitCode.TIMEOUT)
    except OSError as exc:
        _fail(exc, "SMTP connection failed", "Could not talk to SMTP server", ExitCode.TRANSPORT_FAILURE)
    return result.id


@click.command("send-contact", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--full-name", required=True, help="Submitter's full name")
@click.option("--email", required=True, help="Submitter's email address (used as Reply-To)")
@click.option("--plan-interest", required=True, help="Plan the submitter is interested in")
@click.option("--biography", required=True, help="Free-text biography / context")
@click.option("--institution", default=None, help="Institution")
@click.option("--role", default=None, help="Role or position")
@click.option("--research-field", default=None, help="Research field")
@click.option("--openalex-id", default=None, help="OpenAlex author id (e.g. A5023888391)")
@click.option("--estimated-profiles", default=None, help="Estimated number of researcher profiles")
@click.option("--smtp-host", default=None, help="Override smtp.host")
@click.option("--smtp-port", type=int, default=None, help="Override smtp.port")
@click.option("--smtp-user", default=None, help="Override smtp.username")
@click.option("--smtp-pass", default=None, help="Override smtp.password")
@click.option("--secure/--starttls", "secure", default=None, help="Implicit TLS or STARTTLS upgrade")
@click.option("--to", "recipient", default=None, help="Override smtp.recipient")
@click.option("--from", "from_address", default=None, help="Override smtp.from_address")
@click.option("--timeout", type=float, default=None, help="Override smtp.timeout in seconds")
@click.pass_context
def cli_send_contact(
    ctx: click.Context,
    full_name: str,
    email: str,
    plan_interest: str,
    biography: str,
    institution: str | None,
    role: str | None,
    research_field: str | None,
    openalex_id: str | None,
    estimated_profiles: str | None,
    smtp_host: str | None,
    smtp_port: int | None,
    smtp_user: str | None,
    smtp_pass: str | None,
    secure: bool | None,
    recipient: str | None,
    from_address: str | None,
    timeout: float | None,
) -> None:
    """Send a contact inquiry email through the configured SMTP server."""
    cli_ctx = get_cli_context(ctx)
    inquiry = ContactInquiry(
        full_name=full_name,
        email=email,
        plan_interest=plan_interest,
        biography=biography,
        institution=institution,
        role=role,
        research_field=research_field,
        openalex_id=openalex_id,
        estimated_profiles=estimated_profiles,
    )
    overrides = filter_unset(
        host=smtp_host,
        port=smtp_port,
        username=smtp_user,
        password=smtp_pass,
        secure=secure,
        recipient=recipient,
        from_address=from_address,
        timeout=timeout,
    )

    extra = {"command": "send-contact", "submitter": email, "plan_interest": plan_interest}
    with lib_log_rich.runtime.bind(job_id="cli-send-contact", extra=extra):
        smtp_config = _load_smtp_config(cli_ctx, overrides)
        send_id = _deliver(cli_ctx, inquiry, smtp_config)
        logger.info("Contact inquiry sent via CLI", extra={"send_id": send_id, "recipient": smtp_config.recipient})
        click.echo(f"\nContact inquiry sent to {smtp_config.recipient} (id: {send_id})")


__all__ = [
    "apply_validated_overrides",
    "cli_send_contact",
    "filter_unset",
    "sanitize_exception_message",
]
