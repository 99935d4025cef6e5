"""In-memory SMTP server for exercising the client without sockets.

:class:`FakeSmtpServer` answers each command with a canned reply, records what
the client sent, and counts connection attempts, TLS upgrades and ``close()``
calls. :class:`FakeConnector` plays the role of
:func:`~scholarsite_mail.adapters.smtp.stream.open_stream`.

Reply overrides are keyed by step name: ``greeting``, ``EHLO``, ``STARTTLS``,
``AUTH LOGIN``, ``AUTH USER``, ``AUTH PASS``, ``MAIL FROM``, ``RCPT TO``,
``DATA``, ``MESSAGE``, ``QUIT``. A value of ``None`` makes the server hang up
instead of replying.
"""

from __future__ import annotations

import ssl
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..smtp.message import DATA_TERMINATOR
from ..smtp.stream import DuplexStream

DEFAULT_REPLIES: dict[str, str] = {
    "greeting": "220 fake.scholar.name ESMTP ready",
    "EHLO": "250-fake.scholar.name greets you\r\n250-AUTH LOGIN PLAIN\r\n250-STARTTLS\r\n250 8BITMIME",
    "STARTTLS": "220 2.0.0 Ready to start TLS",
    "AUTH LOGIN": "334 VXNlcm5hbWU6",
    "AUTH USER": "334 UGFzc3dvcmQ6",
    "AUTH PASS": "235 2.7.0 Authentication successful",
    "MAIL FROM": "250 2.1.0 OK",
    "RCPT TO": "250 2.1.5 OK",
    "DATA": "354 End data with <CR><LF>.<CR><LF>",
    "MESSAGE": "250 2.0.0 OK queued",
    "QUIT": "221 2.0.0 Bye",
}

_TERMINATOR = DATA_TERMINATOR.encode("ascii")


@dataclass(frozen=True, slots=True)
class ReceivedCommand:
    """A command line the server received and whether it arrived over TLS."""

    line: str
    tls: bool


@dataclass(frozen=True, slots=True)
class ConnectAttempt:
    host: str
    port: int
    tls: bool
    timeout: float | None


@dataclass
class FakeSmtpServer:
    """Scripted SMTP server holding the state of one conversation at a time.

    Attributes:
        replies: Step name -> reply text (CRLF appended when missing), or None
            to hang up at that step.
        chunk_size: When set, every reply is delivered in pieces of this many
            bytes, one piece per ``read()``.
        commands: Every command line received, in order.
        payloads: Raw DATA payloads received (terminator included).
        close_calls: Number of ``close()`` calls across all streams.
        tls_upgrades: Number of STARTTLS upgrades performed.
        tls_error: When set, raised from ``start_tls`` instead of upgrading,
            as a failed TLS handshake would.

    Example:
        >>> server = FakeSmtpServer(replies={"MAIL FROM": "550 5.7.1 Relaying denied"})
        >>> server.replies["MAIL FROM"]
        '550 5.7.1 Relaying denied'
        >>> server.replies["RCPT TO"]
        '250 2.1.5 OK'
    """

    replies: dict[str, str | None] = field(default_factory=dict)
    chunk_size: int | None = None
    commands: list[ReceivedCommand] = field(default_factory=list)
    payloads: list[bytes] = field(default_factory=list)
    close_calls: int = 0
    tls_upgrades: int = 0
    tls_error: BaseException | None = None

    def __post_init__(self) -> None:
        merged: dict[str, str | None] = dict(DEFAULT_REPLIES)
        merged.update(self.replies)
        self.replies = merged
        self._outbox: deque[bytes] = deque()
        self._auth_stage = 0
        self._in_data = False
        self._data_buffer = b""
        self._inbox = b""
        self._hung_up = False

    @classmethod
    def with_replies(cls, overrides: Mapping[str, str | None], *, chunk_size: int | None = None) -> FakeSmtpServer:
        return cls(replies=dict(overrides), chunk_size=chunk_size)

    @property
    def command_lines(self) -> list[str]:
        return [command.line for command in self.commands]

    def ehlo_commands(self) -> list[ReceivedCommand]:
        return [command for command in self.commands if command.line.upper().startswith("EHLO")]

    def connect(self) -> None:
        """Start a new conversation and queue the greeting."""
        self._outbox.clear()
        self._auth_stage = 0
        self._in_data = False
        self._data_buffer = b""
        self._inbox = b""
        self._hung_up = False
        self._reply("greeting")

    def push_raw(self, *chunks: bytes) -> None:
        """Queue raw bytes exactly as given, one ``read()`` per chunk."""
        self._outbox.extend(chunks)

    def next_chunk(self) -> bytes:
        if self._outbox:
            return self._outbox.popleft()
        return b""

    def receive(self, data: bytes, *, tls: bool) -> None:
        if self._hung_up:
            raise ConnectionResetError("fake SMTP server closed the connection")
        if self._in_data:
            self._receive_data(data)
            return
        self._inbox += data
        while b"\r\n" in self._inbox:
            raw, self._inbox = self._inbox.split(b"\r\n", 1)
            self._handle_line(raw.decode("utf-8"), tls=tls)

    def _receive_data(self, data: bytes) -> None:
        self._data_buffer += data
        if self._data_buffer.endswith(_TERMINATOR):
            self.payloads.append(self._data_buffer)
            self._data_buffer = b""
            self._in_data = False
            self._reply("MESSAGE")

    def _handle_line(self, line: str, *, tls: bool) -> None:
        self.commands.append(ReceivedCommand(line=line, tls=tls))
        if self._auth_stage == 1:
            self._auth_stage = 2
            self._reply("AUTH USER")
            return
        if self._auth_stage == 2:
            self._auth_stage = 0
            self._reply("AUTH PASS")
            return

        verb = line.upper()
        if verb.startswith("EHLO"):
            self._reply("EHLO")
        elif verb == "STARTTLS":
            self._reply("STARTTLS")
        elif verb == "AUTH LOGIN":
            self._auth_stage = 1 if self._reply("AUTH LOGIN", expect_prefix="334") else 0
        elif verb.startswith("MAIL FROM:"):
            self._reply("MAIL FROM")
        elif verb.startswith("RCPT TO:"):
            self._reply("RCPT TO")
        elif verb == "DATA":
            self._in_data = self._reply("DATA", expect_prefix="354")
        elif verb == "QUIT":
            self._reply("QUIT")
        else:
            self._outbox.append(b"502 5.5.2 Command not recognized\r\n")

    def _reply(self, step: str, *, expect_prefix: str | None = None) -> bool:
        """Queue the reply for ``step``; return True when it starts with ``expect_prefix``."""
        text = self.replies.get(step)
        if text is None:
            self._hung_up = True
            return False
        if not text.endswith("\r\n"):
            text += "\r\n"
        encoded = text.encode("utf-8")
        if self.chunk_size:
            self._outbox.extend(encoded[i : i + self.chunk_size] for i in range(0, len(encoded), self.chunk_size))
        else:
            self._outbox.append(encoded)
        return expect_prefix is None or text.startswith(expect_prefix)


class FakeStream:
    """DuplexStream backed by a :class:`FakeSmtpServer`."""

    def __init__(self, server: FakeSmtpServer, *, tls: bool) -> None:
        self._server = server
        self._tls = tls

    @property
    def is_tls(self) -> bool:
        return self._tls

    async def read(self) -> bytes:
        return self._server.next_chunk()

    async def write(self, data: bytes) -> None:
        self._server.receive(data, tls=self._tls)

    async def start_tls(self, ssl_context: ssl.SSLContext, *, server_hostname: str) -> DuplexStream:
        if self._tls:
            raise RuntimeError("Stream is already encrypted")
        if self._server.tls_error is not None:
            raise self._server.tls_error
        self._server.tls_upgrades += 1
        return FakeStream(self._server, tls=True)

    async def close(self) -> None:
        self._server.close_calls += 1


@dataclass
class FakeConnector:
    """Connector spy that hands out :class:`FakeStream` objects.

    Attributes:
        server: Server every connection talks to.
        attempts: Every connection attempt, in order.
        error: When set, raised on connect instead of returning a stream.
    """

    server: FakeSmtpServer = field(default_factory=FakeSmtpServer)
    attempts: list[ConnectAttempt] = field(default_factory=list)
    error: BaseException | None = None

    async def __call__(
        self,
        host: str,
        port: int,
        *,
        ssl_context: ssl.SSLContext | None,
        timeout: float | None = None,
    ) -> DuplexStream:
        self.attempts.append(ConnectAttempt(host=host, port=port, tls=ssl_context is not None, timeout=timeout))
        if self.error is not None:
            raise self.error
        self.server.connect()
        return FakeStream(self.server, tls=ssl_context is not None)


__all__ = [
    "DEFAULT_REPLIES",
    "ConnectAttempt",
    "FakeConnector",
    "FakeSmtpServer",
    "FakeStream",
    "ReceivedCommand",
]
