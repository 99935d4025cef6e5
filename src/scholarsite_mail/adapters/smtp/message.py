"""Render a contact inquiry into an RFC 5322 plain-text message.

User-supplied fields are concatenated into headers and body as-is: embedded
CR/LF characters are not escaped and body lines are not dot-stuffed. Non-ASCII
display names and subjects are RFC 2047 encoded; the body travels as 8bit UTF-8.
"""

from __future__ import annotations

import re
from datetime import datetime
from email.header import Header
from email.utils import format_datetime

from scholarsite_mail.domain.inquiry import ContactInquiry, build_subject, build_text_body

CRLF = "\r\n"
DATA_TERMINATOR = f"{CRLF}.{CRLF}"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def normalize_line_endings(text: str) -> str:
    """Convert CRLF, bare CR and bare LF to CRLF; other separators are left alone.

    Example:
        >>> normalize_line_endings("a\\nb\\r\\nc\\rd")
        'a\\r\\nb\\r\\nc\\r\\nd'
    """
    return _LINE_BREAK.sub(CRLF, text)


def encode_header_value(value: str) -> str:
    """Return ``value`` unchanged when it is ASCII, else as RFC 2047 encoded words.

    Example:
        >>> encode_header_value("Jane Doe")
        'Jane Doe'
        >>> encode_header_value("Zo\\u00eb")
        '=?utf-8?b?Wm/Dqw==?='
    """
    if value.isascii():
        return value
    return Header(value, "utf-8").encode(linesep=CRLF)


def build_message(
    inquiry: ContactInquiry,
    *,
    from_address: str,
    from_name: str,
    recipient: str,
    date: datetime | None = None,
) -> str:
    """Return headers, blank line, and body with CRLF line endings.

    Replies go to the submitter through ``Reply-To``.

    Args:
        inquiry: Inquiry to render.
        from_address: Mailbox placed in the From header.
        from_name: Display name placed in the From header.
        recipient: Mailbox placed in the To header.
        date: Value of the Date header; defaults to now (local time).

    Example:
        >>> inquiry = ContactInquiry("Jane Doe", "jane@uni.edu", "pro", "ML researcher")
        >>> message = build_message(inquiry, from_address="bot@scholar.name", from_name="ScholarSite",
        ...                         recipient="info@scholar.name")
        >>> "Reply-To: jane@uni.edu\\r\\n" in message
        True
    """
    moment = date if date is not None else datetime.now().astimezone()
    headers = [
        f"From: {encode_header_value(from_name)} <{from_address}>",
        f"To: {recipient}",
        f"Reply-To: {inquiry.email}",
        f"Subject: {encode_header_value(build_subject(inquiry))}",
        f"Date: {format_datetime(moment)}",
        "MIME-Version: 1.0",
        "Content-Type: text/plain; charset=utf-8",
        "Content-Transfer-Encoding: 8bit",
    ]
    return CRLF.join(headers) + CRLF + CRLF + normalize_line_endings(build_text_body(inquiry))


def build_data_payload(message: str) -> bytes:
    """Append the end-of-data marker and encode for the DATA phase.

    Example:
        >>> build_data_payload("Subject: hi\\r\\n\\r\\nbody")
        b'Subject: hi\\r\\n\\r\\nbody\\r\\n.\\r\\n'
    """
    return (message + DATA_TERMINATOR).encode("utf-8")


__all__ = [
    "CRLF",
    "DATA_TERMINATOR",
    "build_data_payload",
    "build_message",
    "encode_header_value",
    "normalize_line_endings",
]
