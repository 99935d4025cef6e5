"""Logging stand-in for the testing composition.

CLI tests run the full command path without starting the lib_log_rich
runtime; records still flow through stdlib ``logging`` and caplog.
"""

from __future__ import annotations

from lib_layered_config import Config


def init_logging_in_memory(config: Config) -> None:
    """Leave logging untouched; the ``[lib_log_rich]`` section is ignored."""


__all__ = ["init_logging_in_memory"]
