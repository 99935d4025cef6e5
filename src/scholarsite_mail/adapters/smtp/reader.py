"""Buffered SMTP reply reader.

SMTP replies may span several lines: ``250-`` marks a continuation line and
``250 `` (code followed by a space) marks the last line. Replies may also be
split arbitrarily across TCP segments, so the reader accumulates chunks until a
final line arrives and keeps any surplus bytes for the next reply.

Contents:
    * :class:`SmtpReply` - One complete (possibly multi-line) reply.
    * :class:`SmtpResponseReader` - Reads complete replies from a DuplexStream.
    * :func:`parse_reply_line` - Split a single line into code, marker, text.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from scholarsite_mail.domain.errors import SmtpProtocolError

from .stream import DuplexStream

logger = logging.getLogger(__name__)

_FINAL_MARKER = " "
_CONTINUATION_MARKER = "-"


@dataclass(frozen=True, slots=True)
class SmtpReply:
    """A complete server reply.

    Attributes:
        code: Three-digit reply code shared by all lines.
        lines: Raw reply lines without line terminators, in arrival order.

    Example:
        >>> reply = SmtpReply(code=250, lines=("250-mail.example.com", "250 AUTH LOGIN"))
        >>> reply.final_line
        '250 AUTH LOGIN'
        >>> reply.text
        'mail.example.com\\nAUTH LOGIN'
    """

    code: int
    lines: tuple[str, ...]

    @property
    def final_line(self) -> str:
        return self.lines[-1] if self.lines else ""

    @property
    def text(self) -> str:
        """Reply text with the code and markers stripped, one line per line."""
        return "\n".join(line[4:] for line in self.lines)


def parse_reply_line(line: str) -> tuple[int, bool] | None:
    """Return ``(code, is_final)`` for a reply line, or None when it is malformed.

    A bare three-digit code counts as a final line.

    Examples:
        >>> parse_reply_line("250-PIPELINING")
        (250, False)
        >>> parse_reply_line("250 OK")
        (250, True)
        >>> parse_reply_line("220")
        (220, True)
        >>> parse_reply_line("hello") is None
        True
    """
    if len(line) < 3 or not line[:3].isdigit():
        return None
    if len(line) == 3:
        return int(line[:3]), True
    marker = line[3]
    if marker == _FINAL_MARKER:
        return int(line[:3]), True
    if marker == _CONTINUATION_MARKER:
        return int(line[:3]), False
    return None


class SmtpResponseReader:
    """Read complete SMTP replies from a stream.

    The reader owns the receive buffer for one stream. After a STARTTLS
    upgrade build a new reader on the encrypted stream so nothing received
    in plaintext leaks into the TLS session.

    Args:
        stream: Stream to read chunks from.
        timeout: Seconds to wait for each chunk; None waits indefinitely.
    """

    def __init__(self, stream: DuplexStream, *, timeout: float | None = None) -> None:
        self._stream = stream
        self._timeout = timeout
        self._buffer = b""

    @property
    def pending(self) -> bytes:
        """Bytes received but not yet consumed by a reply."""
        return self._buffer

    async def read_reply(self) -> SmtpReply:
        """Return the next complete reply, waiting for more data as needed.

        Raises:
            ConnectionError: The server closed the connection mid-reply.
            SmtpProtocolError: A received line is not a valid reply line
                (reported with code 0).
            TimeoutError: No data arrived within ``timeout``.
        """
        lines: list[str] = []
        while True:
            line = await self._next_line()
            parsed = parse_reply_line(line)
            if parsed is None:
                raise SmtpProtocolError(step="reply", code=0, expected=(), line=line)
            code, is_final = parsed
            lines.append(line)
            if is_final:
                reply = SmtpReply(code=code, lines=tuple(lines))
                logger.debug("SMTP reply", extra={"code": code, "line": reply.final_line})
                return reply

    async def _next_line(self) -> str:
        while b"\n" not in self._buffer:
            chunk = await self._read_chunk()
            if not chunk:
                raise ConnectionError("SMTP server closed the connection before completing its reply")
            self._buffer += chunk
        raw, self._buffer = self._buffer.split(b"\n", 1)
        return raw.rstrip(b"\r").decode("utf-8", errors="replace")

    async def _read_chunk(self) -> bytes:
        if self._timeout is None:
            return await self._stream.read()
        return await asyncio.wait_for(self._stream.read(), self._timeout)


__all__ = [
    "SmtpReply",
    "SmtpResponseReader",
    "parse_reply_line",
]
