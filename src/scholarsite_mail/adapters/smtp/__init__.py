"""SMTP adapter - contact inquiry delivery over a hand-rolled SMTP client.

Structure:
    * :mod:`.config` - SmtpConfig model and env/dict loaders
    * :mod:`.stream` - Plaintext/TLS duplex streams and the connector
    * :mod:`.reader` - Buffered multi-line reply reader
    * :mod:`.message` - Message and DATA payload construction
    * :mod:`.client` - The SMTP conversation state machine
    * :mod:`.sender` - send_contact_email entry points
"""

from __future__ import annotations

from .config import SmtpConfig, load_smtp_config_from_dict, load_smtp_config_from_env
from .sender import SendResult, contact_recipient_email, send_contact_email, send_contact_email_sync

__all__ = [
    "SendResult",
    "SmtpConfig",
    "contact_recipient_email",
    "load_smtp_config_from_dict",
    "load_smtp_config_from_env",
    "send_contact_email",
    "send_contact_email_sync",
]
