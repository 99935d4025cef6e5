"""Static package metadata and layered-config identifiers.

The version line is kept in sync with ``pyproject.toml``.
"""

from __future__ import annotations

name = "scholarsite_mail"
title = "ScholarSite contact inquiry mailer - hand-rolled SMTP delivery"
version = "1.0.0"
homepage = "https://scholar.name"
author = "Scholar.name"
author_email = "info@scholar.name"
shell_command = "scholarsite-mail"

#: Vendor, application and slug used by lib_layered_config to derive
#: platform-specific configuration directories.
LAYEREDCONF_VENDOR = "Scholar.name"
LAYEREDCONF_APP = "ScholarSite Mail"
LAYEREDCONF_SLUG = "scholarsite-mail"


def print_info() -> None:
    """Print the summarised metadata block.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for scholarsite_mail:
        ...
    """
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    )
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
