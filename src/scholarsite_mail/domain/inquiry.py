"""Contact inquiry value object and its plain-text rendering.

The web form handler builds a :class:`ContactInquiry` once per submission and
hands it to the mail sender, which only reads it to render the message.

Contents:
    * :class:`ContactInquiry` - Immutable inquiry submitted through the contact form.
    * :func:`format_details` - Labelled detail lines, absent fields omitted.
    * :func:`build_subject` - Subject line naming the submitter.
    * :func:`build_text_body` - Complete plain-text message body.
"""

from __future__ import annotations

from dataclasses import dataclass

OPENALEX_PROFILE_URL = "https://openalex.org/"
INTRO_LINE = "New contact inquiry received."
BIOGRAPHY_HEADING = "Biography / context:"


@dataclass(frozen=True, slots=True)
class ContactInquiry:
    """Inquiry collected by the contact form.

    Example:
        >>> inquiry = ContactInquiry(
        ...     full_name="Jane Doe",
        ...     email="jane@uni.edu",
        ...     plan_interest="pro",
        ...     biography="ML researcher",
        ... )
        >>> inquiry.institution is None
        True
    """

    full_name: str
    email: str
    plan_interest: str
    biography: str
    institution: str | None = None
    role: str | None = None
    research_field: str | None = None
    openalex_id: str | None = None
    estimated_profiles: str | None = None


def format_details(inquiry: ContactInquiry) -> str:
    """Return the labelled detail lines of an inquiry.

    Name, Email and Plan interest are always listed, even when empty.
    Optional fields that are ``None`` or empty are left out entirely.

    Example:
        >>> inquiry = ContactInquiry("Jane Doe", "jane@uni.edu", "pro", "bio", role="PI")
        >>> print(format_details(inquiry))
        Name: Jane Doe
        Email: jane@uni.edu
        Role: PI
        Plan interest: pro
    """
    details: list[tuple[str, str | None, bool]] = [
        ("Name", inquiry.full_name, True),
        ("Email", inquiry.email, True),
        ("Institution", inquiry.institution, False),
        ("Role", inquiry.role, False),
        ("Plan interest", inquiry.plan_interest, True),
        ("Research field", inquiry.research_field, False),
        ("OpenAlex ID", inquiry.openalex_id, False),
        ("Estimated profiles", inquiry.estimated_profiles, False),
    ]
    return "\n".join(f"{label}: {value}" for label, value, required in details if required or value)


def build_subject(inquiry: ContactInquiry) -> str:
    """Return the subject line for an inquiry.

    Example:
        >>> build_subject(ContactInquiry("Jane Doe", "jane@uni.edu", "pro", "bio"))
        'New contact inquiry from Jane Doe'
    """
    return f"New contact inquiry from {inquiry.full_name}"


def build_text_body(inquiry: ContactInquiry) -> str:
    """Render the plain-text body: intro, details, OpenAlex link, biography.

    Blocks are separated by a blank line; empty blocks are dropped. Line
    endings are bare ``\\n`` here and normalized by the message builder.

    Example:
        >>> body = build_text_body(ContactInquiry("Jane Doe", "jane@uni.edu", "pro", "ML researcher"))
        >>> body.splitlines()[0]
        'New contact inquiry received.'
        >>> body.endswith("Biography / context:\\n\\nML researcher")
        True
    """
    openalex_line = f"OpenAlex: {OPENALEX_PROFILE_URL}{inquiry.openalex_id}" if inquiry.openalex_id else ""
    blocks = [
        INTRO_LINE,
        format_details(inquiry),
        openalex_line,
        BIOGRAPHY_HEADING,
        inquiry.biography,
    ]
    return "\n\n".join(block for block in blocks if block)


__all__ = [
    "BIOGRAPHY_HEADING",
    "INTRO_LINE",
    "OPENALEX_PROFILE_URL",
    "ContactInquiry",
    "build_subject",
    "build_text_body",
    "format_details",
]
