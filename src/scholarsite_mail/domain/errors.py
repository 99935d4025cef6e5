"""Domain-specific exceptions for typed error handling at boundaries.

Transport failures (DNS, refused or reset connections, TLS handshake errors,
timeouts) are not wrapped: they surface as the builtin ``OSError`` family.
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete configuration.

    Raised before any network I/O when required SMTP settings are absent.
    Typically caught at CLI boundaries to provide user-friendly error messages.

    Example:
        >>> err = ConfigurationError("SMTP configuration incomplete: missing host")
        >>> str(err)
        'SMTP configuration incomplete: missing host'
    """


class DeliveryError(Exception):
    """Email delivery failed at SMTP level.

    Example:
        >>> str(DeliveryError("Message rejected"))
        'Message rejected'
    """


class SmtpProtocolError(DeliveryError):
    """The server answered a step with a reply code outside the expected set.

    Attributes:
        step: Label of the command that received the reply (e.g. ``MAIL FROM``).
        code: Numeric reply code received (0 when the line was unparseable).
        expected: Reply codes that step accepts.
        line: Raw final reply line as sent by the server.

    Example:
        >>> err = SmtpProtocolError(step="MAIL FROM", code=550, expected=(250,), line="550 5.7.1 Relaying denied")
        >>> str(err)
        'MAIL FROM: unexpected SMTP reply 550 (expected 250): 550 5.7.1 Relaying denied'
        >>> err.code
        550
    """

    def __init__(self, *, step: str, code: int, expected: tuple[int, ...], line: str) -> None:
        self.step = step
        self.code = code
        self.expected = expected
        self.line = line
        wanted = " or ".join(str(value) for value in expected) if expected else "a valid reply"
        super().__init__(f"{step}: unexpected SMTP reply {code} (expected {wanted}): {line}")


class InvalidRecipientError(ValueError):
    """Email address validation failure.

    Inherits from ValueError so ``except ValueError`` handlers still catch it.

    Example:
        >>> err = InvalidRecipientError("Invalid email: not-an-email")
        >>> isinstance(err, ValueError)
        True
    """


__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "InvalidRecipientError",
    "SmtpProtocolError",
]
