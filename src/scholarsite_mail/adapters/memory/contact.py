"""In-memory contact mail adapters for testing.

Provides functions that satisfy the same Protocols as the production SMTP
adapters but never open a connection.

Contents:
    * :class:`ContactMailSpy` - Captures send calls for test assertions.
    * :func:`load_smtp_config_from_dict_in_memory` - Loader that ignores the process environment.
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...domain.inquiry import ContactInquiry
from ..smtp.config import SmtpConfig, load_smtp_config_from_dict
from ..smtp.sender import SendResult


@dataclass
class ContactMailSpy:
    """Captures contact mail sends for test assertions.

    Each test should create its own ContactMailSpy to avoid cross-test pollution.

    Attributes:
        sent: One record per send call, with the inquiry and config.
        raise_exception: When set, send raises this exception after recording.

    Example:
        >>> spy = ContactMailSpy()
        >>> inquiry = ContactInquiry("Jane Doe", "jane@uni.edu", "pro", "ML researcher")
        >>> config = SmtpConfig(host="smtp.test.com", username="bot@test.com", password="pw")
        >>> spy.send_contact_email(inquiry, config=config).id
        'smtp-1'
        >>> spy.sent[0]["inquiry"].full_name
        'Jane Doe'
    """

    sent: list[dict[str, Any]] = field(default_factory=list)
    raise_exception: Exception | None = None
    _counter: itertools.count[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.sent.clear()
        self.raise_exception = None

    def send_contact_email(self, inquiry: ContactInquiry, *, config: SmtpConfig) -> SendResult:
        """Record the call, then raise ``raise_exception`` or return a synthetic id.

        Runs the same credential precondition as the real sender so the CLI
        error paths behave identically.
        """
        config.require_credentials()
        self.sent.append({"inquiry": inquiry, "config": config})
        if self.raise_exception is not None:
            raise self.raise_exception
        return SendResult(id=f"smtp-{next(self._counter)}")


def load_smtp_config_from_dict_in_memory(config_dict: Mapping[str, Any]) -> SmtpConfig:
    """Parse the ``[smtp]`` section with the real model, ignoring ``os.environ``."""
    return load_smtp_config_from_dict(config_dict, environ={})


__all__ = [
    "ContactMailSpy",
    "load_smtp_config_from_dict_in_memory",
]
