"""CLI command implementations registered on the root group.

Contents:
    * Info command from :mod:`.info`
    * Config commands from :mod:`.config`
    * Contact mail command from :mod:`.contact`
"""

from __future__ import annotations

from .config import cli_config, cli_config_deploy
from .contact import cli_send_contact
from .info import cli_info

__all__ = [
    "cli_config",
    "cli_config_deploy",
    "cli_info",
    "cli_send_contact",
]
