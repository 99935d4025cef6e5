"""Domain layer - pure business logic with no I/O or framework dependencies.

Contents:
    * :mod:`.inquiry` - Contact inquiry value object and text rendering
    * :mod:`.enums` - Domain enumerations (OutputFormat, DeployTarget, TlsMode)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .enums import DeployTarget, OutputFormat, TlsMode
from .errors import ConfigurationError, DeliveryError, InvalidRecipientError, SmtpProtocolError
from .inquiry import ContactInquiry, build_subject, build_text_body, format_details

__all__ = [
    # Inquiry
    "ContactInquiry",
    "build_subject",
    "build_text_body",
    "format_details",
    # Enums
    "DeployTarget",
    "OutputFormat",
    "TlsMode",
    # Errors
    "ConfigurationError",
    "DeliveryError",
    "InvalidRecipientError",
    "SmtpProtocolError",
]
