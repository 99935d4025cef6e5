"""CLI adapter - rich-click command line interface.

Contents:
    * :mod:`.root` - Root command group and global options
    * :mod:`.main` - Entry point with exception-to-exit-code handling
    * :mod:`.context` - Click context and traceback state helpers
    * :mod:`.commands` - Subcommands (info, config, config-deploy, send-contact)
"""

from __future__ import annotations

from .commands import cli_config, cli_config_deploy, cli_info, cli_send_contact
from .context import (
    TracebackState,
    apply_traceback_preferences,
    restore_traceback_state,
    snapshot_traceback_state,
)
from .exit_codes import ExitCode
from .main import main
from .root import cli

__all__ = [
    "ExitCode",
    "TracebackState",
    "apply_traceback_preferences",
    "cli",
    "cli_config",
    "cli_config_deploy",
    "cli_info",
    "cli_send_contact",
    "main",
    "restore_traceback_state",
    "snapshot_traceback_state",
]
