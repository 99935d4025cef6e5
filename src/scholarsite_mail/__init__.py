"""Public package surface for the ScholarSite contact inquiry mailer.

Routes imports through the architectural layers:
- Domain exports: ContactInquiry and its rendering
- Adapter exports: SmtpConfig and the send entry points
- Composition exports: Layered configuration loader
- Metadata: Package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Adapter exports
from .adapters.smtp import (
    SendResult,
    SmtpConfig,
    contact_recipient_email,
    load_smtp_config_from_dict,
    load_smtp_config_from_env,
    send_contact_email,
    send_contact_email_sync,
)

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain.errors import ConfigurationError, DeliveryError, SmtpProtocolError
from .domain.inquiry import ContactInquiry

__all__ = [
    "ConfigurationError",
    "ContactInquiry",
    "DeliveryError",
    "SendResult",
    "SmtpConfig",
    "SmtpProtocolError",
    "contact_recipient_email",
    "get_config",
    "load_smtp_config_from_dict",
    "load_smtp_config_from_env",
    "print_info",
    "send_contact_email",
    "send_contact_email_sync",
]
