"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.smtp` - Hand-rolled SMTP delivery of contact inquiries
    * :mod:`.config` - Configuration loading, deployment, display, and overrides
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.cli` - rich-click CLI
    * :mod:`.memory` - In-memory adapters for tests
"""

from __future__ import annotations

__all__: list[str] = []
