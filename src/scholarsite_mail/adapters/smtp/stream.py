"""Duplex byte streams over asyncio: plaintext and TLS behind one interface.

The SMTP conversation reads, writes, and closes without caring whether the
connection is encrypted. The only place the distinction matters is the
STARTTLS upgrade, which turns a :class:`PlainStream` into a :class:`TlsStream`
over the same TCP connection.

Contents:
    * :class:`DuplexStream` - Protocol shared by both stream kinds.
    * :class:`Connector` - Protocol for functions that open a DuplexStream.
    * :class:`PlainStream` - Plaintext TCP stream.
    * :class:`TlsStream` - TLS stream (implicit TLS or after STARTTLS).
    * :func:`open_stream` - Production connector built on ``asyncio.open_connection``.
"""

from __future__ import annotations

import asyncio
import logging
import ssl
from typing import Protocol

logger = logging.getLogger(__name__)

#: Upper bound for a single read from the socket.
READ_CHUNK_SIZE = 4096


class DuplexStream(Protocol):
    """Bidirectional byte stream used by the SMTP session."""

    @property
    def is_tls(self) -> bool: ...

    async def read(self) -> bytes:
        """Return the next available chunk; ``b""`` signals EOF."""
        ...

    async def write(self, data: bytes) -> None: ...

    async def start_tls(self, ssl_context: ssl.SSLContext, *, server_hostname: str) -> DuplexStream:
        """Upgrade this connection in place and return the encrypted stream."""
        ...

    async def close(self) -> None: ...


class Connector(Protocol):
    """Open a connection to ``host:port``; TLS from the start when ``ssl_context`` is given."""

    async def __call__(
        self,
        host: str,
        port: int,
        *,
        ssl_context: ssl.SSLContext | None,
        timeout: float | None = None,
    ) -> DuplexStream: ...


class _AsyncioStream:
    """Shared read/write/close over an asyncio reader/writer pair."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self._reader = reader
        self._writer = writer

    async def read(self) -> bytes:
        return await self._reader.read(READ_CHUNK_SIZE)

    async def write(self, data: bytes) -> None:
        self._writer.write(data)
        await self._writer.drain()

    async def close(self) -> None:
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except (ConnectionError, ssl.SSLError) as exc:
            # Peer already tore the connection down; the socket is closed either way.
            logger.debug("Stream closed with error", extra={"error": str(exc)})


class PlainStream(_AsyncioStream):
    """Plaintext TCP connection, upgradable once via STARTTLS."""

    @property
    def is_tls(self) -> bool:
        return False

    async def start_tls(self, ssl_context: ssl.SSLContext, *, server_hostname: str) -> DuplexStream:
        await self._writer.start_tls(ssl_context, server_hostname=server_hostname)
        # StreamWriter.start_tls rewires the reader's transport as well.
        return TlsStream(self._reader, self._writer)


class TlsStream(_AsyncioStream):
    """Encrypted connection; cannot be upgraded again."""

    @property
    def is_tls(self) -> bool:
        return True

    async def start_tls(self, ssl_context: ssl.SSLContext, *, server_hostname: str) -> DuplexStream:
        raise RuntimeError("Stream is already encrypted")


async def open_stream(
    host: str,
    port: int,
    *,
    ssl_context: ssl.SSLContext | None,
    timeout: float | None = None,
) -> DuplexStream:
    """Open a TCP connection, TLS-wrapped from the first byte when ``ssl_context`` is set.

    Args:
        host: Server hostname (also used for SNI and certificate checks).
        port: Server port.
        ssl_context: TLS context for implicit TLS, or None for plaintext.
        timeout: Connect timeout in seconds; None waits indefinitely.

    Raises:
        OSError: DNS failure, refused connection, or TLS handshake failure.
        TimeoutError: When ``timeout`` elapses before the connection opens.
    """
    logger.debug("Opening SMTP connection", extra={"host": host, "port": port, "tls": ssl_context is not None})
    reader, writer = await asyncio.wait_for(
        asyncio.open_connection(host, port, ssl=ssl_context, server_hostname=host if ssl_context else None),
        timeout,
    )
    if ssl_context is not None:
        return TlsStream(reader, writer)
    return PlainStream(reader, writer)


__all__ = [
    "READ_CHUNK_SIZE",
    "Connector",
    "DuplexStream",
    "PlainStream",
    "TlsStream",
    "open_stream",
]
