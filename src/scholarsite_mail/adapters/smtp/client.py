"""Hand-rolled SMTP conversation for submitting a single message.

The conversation is strictly linear: every command waits for its reply before
the next one is sent, and any reply code outside the step's expected set
aborts with :class:`~scholarsite_mail.domain.errors.SmtpProtocolError`.

    greeting 220 -> EHLO 250 -> [STARTTLS 220 -> TLS upgrade -> EHLO 250]
    -> AUTH LOGIN 334 -> username 334 -> password 235
    -> MAIL FROM 250 -> RCPT TO 250/251 -> DATA 354 -> payload 250 -> QUIT

Contents:
    * :class:`SmtpSession` - Runs the conversation over one DuplexStream.
"""

from __future__ import annotations

import base64
import logging
import ssl

from scholarsite_mail.domain.errors import SmtpProtocolError

from .reader import SmtpReply, SmtpResponseReader
from .stream import DuplexStream

logger = logging.getLogger(__name__)

GREETING_OK = (220,)
EHLO_OK = (250,)
STARTTLS_OK = (220,)
AUTH_CONTINUE = (334,)
AUTH_OK = (235,)
MAIL_FROM_OK = (250,)
RCPT_TO_OK = (250, 251)
DATA_OK = (354,)
MESSAGE_OK = (250,)

_REDACTED = "[REDACTED]"


def _b64(value: str) -> str:
    """Base64-encode a credential for AUTH LOGIN.

    Example:
        >>> _b64("user@example.com")
        'dXNlckBleGFtcGxlLmNvbQ=='
    """
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


class SmtpSession:
    """One SMTP conversation over one stream.

    The session never opens or closes the connection; the caller owns the
    stream and must close :attr:`stream` (which changes after STARTTLS).

    Args:
        stream: Freshly connected stream, server greeting not yet read.
        ehlo_name: Name announced in EHLO.
        timeout: Per-read timeout in seconds; None waits indefinitely.
    """

    def __init__(self, stream: DuplexStream, *, ehlo_name: str, timeout: float | None = None) -> None:
        self.stream = stream
        self._ehlo_name = ehlo_name
        self._timeout = timeout
        self._reader = SmtpResponseReader(stream, timeout=timeout)
        self.ehlo_count = 0

    async def expect(self, step: str, expected: tuple[int, ...]) -> SmtpReply:
        """Read the next reply and require its code to be in ``expected``."""
        reply = await self._reader.read_reply()
        if reply.code not in expected:
            raise SmtpProtocolError(step=step, code=reply.code, expected=expected, line=reply.final_line)
        return reply

    async def command(
        self,
        line: str,
        expected: tuple[int, ...],
        *,
        step: str | None = None,
        log_as: str | None = None,
    ) -> SmtpReply:
        """Send one command line and check its reply.

        Args:
            line: Command text without the trailing CRLF.
            expected: Acceptable reply codes.
            step: Label for errors; defaults to the command text.
            log_as: Replacement text for the debug log (hides credentials).
        """
        label = step or line
        logger.debug("SMTP command", extra={"command": log_as or line})
        await self.stream.write(f"{line}\r\n".encode())
        return await self.expect(label, expected)

    async def greeting(self) -> SmtpReply:
        return await self.expect("greeting", GREETING_OK)

    async def ehlo(self) -> SmtpReply:
        self.ehlo_count += 1
        return await self.command(f"EHLO {self._ehlo_name}", EHLO_OK, step="EHLO")

    async def starttls(self, ssl_context: ssl.SSLContext, *, server_hostname: str) -> None:
        """Upgrade the connection to TLS and renegotiate capabilities.

        A fresh reader is bound to the encrypted stream; the pre-TLS EHLO
        response is discarded along with any buffered plaintext.
        """
        await self.command("STARTTLS", STARTTLS_OK)
        self.stream = await self.stream.start_tls(ssl_context, server_hostname=server_hostname)
        self._reader = SmtpResponseReader(self.stream, timeout=self._timeout)
        logger.debug("SMTP connection upgraded to TLS", extra={"server_hostname": server_hostname})
        await self.ehlo()

    async def auth_login(self, username: str, password: str) -> None:
        await self.command("AUTH LOGIN", AUTH_CONTINUE)
        await self.command(_b64(username), AUTH_CONTINUE, step="AUTH LOGIN username", log_as=_REDACTED)
        await self.command(_b64(password), AUTH_OK, step="AUTH LOGIN password", log_as=_REDACTED)

    async def mail_from(self, address: str) -> SmtpReply:
        return await self.command(f"MAIL FROM:<{address}>", MAIL_FROM_OK, step="MAIL FROM")

    async def rcpt_to(self, address: str) -> SmtpReply:
        return await self.command(f"RCPT TO:<{address}>", RCPT_TO_OK, step="RCPT TO")

    async def data(self, payload: bytes) -> SmtpReply:
        """Run the DATA phase; ``payload`` must already end with CRLF.CRLF."""
        await self.command("DATA", DATA_OK)
        logger.debug("SMTP message payload", extra={"size": len(payload)})
        await self.stream.write(payload)
        return await self.expect("message", MESSAGE_OK)

    async def quit(self) -> None:
        """Send QUIT and read the reply without checking it.

        The message is already accepted at this point, so a server that drops
        the connection instead of answering does not fail the send.
        """
        logger.debug("SMTP command", extra={"command": "QUIT"})
        try:
            await self.stream.write(b"QUIT\r\n")
            reply = await self._reader.read_reply()
        except (OSError, SmtpProtocolError) as exc:
            logger.debug("QUIT reply not received", extra={"error": str(exc)})
            return
        logger.debug("SMTP session closed by QUIT", extra={"code": reply.code})


__all__ = [
    "AUTH_CONTINUE",
    "AUTH_OK",
    "DATA_OK",
    "EHLO_OK",
    "GREETING_OK",
    "MAIL_FROM_OK",
    "MESSAGE_OK",
    "RCPT_TO_OK",
    "STARTTLS_OK",
    "SmtpSession",
]
