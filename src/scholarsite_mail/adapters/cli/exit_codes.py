"""POSIX-conventional exit codes for CLI error paths.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes following sysexits.h and errno conventions.

    Example:
        >>> int(ExitCode.SMTP_FAILURE)
        69
        >>> int(ExitCode.CONFIG_ERROR)
        78
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    PERMISSION_DENIED = 13
    INVALID_ARGUMENT = 22
    SMTP_FAILURE = 69
    TRANSPORT_FAILURE = 74
    CONFIG_ERROR = 78
    TIMEOUT = 110


__all__ = ["ExitCode"]
