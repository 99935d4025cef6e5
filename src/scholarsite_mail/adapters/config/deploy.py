"""Deploy the bundled default configuration to app/host/user directories."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from lib_layered_config import deploy_config
from lib_layered_config.examples.deploy import DeployAction

from scholarsite_mail import __init__conf__
from scholarsite_mail.adapters.config.loader import get_default_config_path, validate_profile
from scholarsite_mail.domain.enums import DeployTarget

logger = logging.getLogger(__name__)

_DEPLOYED_ACTIONS = frozenset({DeployAction.CREATED, DeployAction.OVERWRITTEN})


def deploy_configuration(
    *,
    targets: Sequence[DeployTarget],
    force: bool = False,
    profile: str | None = None,
) -> list[Path]:
    """Copy ``defaultconfig.toml`` into the requested configuration layers.

    The user layer is the usual place to keep SMTP credentials; files are
    created with private permissions there (700/600) and world-readable ones
    for app/host.

    Args:
        targets: Layers to deploy to.
        force: Overwrite files that already exist.
        profile: Deploy into ``profile/<name>/`` subdirectories.

    Returns:
        Paths that were created or overwritten. Empty when every target
        already existed and ``force`` is False.

    Raises:
        PermissionError: When deploying to app/host without privileges.
        ValueError: When the profile name is invalid.
    """
    if profile is not None:
        validate_profile(profile)

    results = deploy_config(
        source=get_default_config_path(),
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        targets=[t.value for t in targets],
        force=force,
        set_permissions=True,
    )

    paths = [result.destination for result in results if result.action in _DEPLOYED_ACTIONS]
    logger.info("Configuration deployed", extra={"targets": [t.value for t in targets], "paths": [str(p) for p in paths]})
    return paths


__all__ = ["deploy_configuration"]
