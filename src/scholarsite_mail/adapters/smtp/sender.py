"""Contact inquiry delivery over a hand-rolled SMTP conversation.

One call opens one connection, submits one message, and closes the
connection again. Nothing is retried and no state survives the call.

Contents:
    * :class:`SendResult` - Locally generated correlation id of a send.
    * :func:`send_contact_email` - Async primary interface.
    * :func:`send_contact_email_sync` - Blocking wrapper for synchronous callers.
    * :func:`contact_recipient_email` - Resolved destination mailbox.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
import time
from collections.abc import Callable
from dataclasses import dataclass

from scholarsite_mail.domain.enums import TlsMode
from scholarsite_mail.domain.inquiry import ContactInquiry, build_subject

from .client import SmtpSession
from .config import SmtpConfig
from .message import build_data_payload, build_message
from .stream import Connector, DuplexStream, open_stream

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of an accepted send.

    ``id`` is a timestamp token (``smtp-<milliseconds>``) for local log
    correlation, not a server-assigned message id.
    """

    id: str


def _make_send_id(clock: Callable[[], float]) -> str:
    """Return ``smtp-<epoch milliseconds>``.

    Example:
        >>> _make_send_id(lambda: 1700000000.1234)
        'smtp-1700000000123'
    """
    return f"smtp-{int(clock() * 1000)}"


def contact_recipient_email(config: SmtpConfig) -> str:
    """Return the mailbox contact inquiries are delivered to."""
    return config.recipient


async def _converse(
    session: SmtpSession,
    config: SmtpConfig,
    inquiry: ContactInquiry,
    *,
    host: str,
    ssl_context: ssl.SSLContext,
) -> None:
    await session.greeting()
    await session.ehlo()
    if config.tls_mode is TlsMode.STARTTLS:
        await session.starttls(ssl_context, server_hostname=host)
    await session.auth_login(config.username or "", config.password or "")

    sender = config.resolved_from_address
    await session.mail_from(sender)
    await session.rcpt_to(config.recipient)
    message = build_message(
        inquiry,
        from_address=sender,
        from_name=config.from_name,
        recipient=config.recipient,
    )
    await session.data(build_data_payload(message))
    await session.quit()


async def send_contact_email(
    inquiry: ContactInquiry,
    *,
    config: SmtpConfig,
    connector: Connector = open_stream,
    ssl_context: ssl.SSLContext | None = None,
    clock: Callable[[], float] = time.time,
) -> SendResult:
    """Deliver one contact inquiry to the configured recipient.

    Args:
        inquiry: Inquiry to send. Read only.
        config: SMTP settings; host, username and password are required.
        connector: Opens the connection. Replace in tests to avoid sockets.
        ssl_context: TLS context for implicit TLS and STARTTLS. Defaults to
            ``ssl.create_default_context()`` (certificate verification on).
        clock: Time source for the returned id.

    Returns:
        SendResult carrying a locally generated ``smtp-<digits>`` id.

    Raises:
        ConfigurationError: Host, username or password is missing. Raised
            before any connection attempt.
        SmtpProtocolError: The server answered a step with an unexpected code.
        OSError: Transport failure (DNS, refused, reset, TLS handshake,
            timeout, premature EOF). Propagated unchanged.

    Side Effects:
        Opens exactly one outbound connection and closes it on every exit path.
    """
    config.require_credentials()
    host = config.host or ""
    port = config.resolved_port
    context = ssl_context if ssl_context is not None else ssl.create_default_context()
    implicit_tls = config.tls_mode is TlsMode.IMPLICIT

    logger.info(
        "Sending contact inquiry",
        extra={
            "host": host,
            "port": port,
            "tls_mode": config.tls_mode.value,
            "recipient": config.recipient,
            "subject": build_subject(inquiry),
        },
    )

    stream: DuplexStream = await connector(
        host,
        port,
        ssl_context=context if implicit_tls else None,
        timeout=config.timeout,
    )
    session = SmtpSession(stream, ehlo_name=config.resolved_ehlo_name, timeout=config.timeout)
    try:
        await _converse(session, config, inquiry, host=host, ssl_context=context)
    except Exception:
        logger.debug("SMTP delivery failed", exc_info=True)
        raise
    finally:
        await session.stream.close()

    result = SendResult(id=_make_send_id(clock))
    logger.info("Contact inquiry sent", extra={"send_id": result.id, "recipient": config.recipient})
    return result


def send_contact_email_sync(
    inquiry: ContactInquiry,
    *,
    config: SmtpConfig,
    connector: Connector = open_stream,
    ssl_context: ssl.SSLContext | None = None,
) -> SendResult:
    """Run :func:`send_contact_email` to completion on a fresh event loop.

    Must not be called from inside a running event loop.
    """
    return asyncio.run(send_contact_email(inquiry, config=config, connector=connector, ssl_context=ssl_context))


__all__ = [
    "SendResult",
    "contact_recipient_email",
    "send_contact_email",
    "send_contact_email_sync",
]
