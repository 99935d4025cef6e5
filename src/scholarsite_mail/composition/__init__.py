"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..adapters.config.deploy import deploy_configuration
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config, get_default_config_path
from ..adapters.logging.setup import init_logging
from ..adapters.smtp.config import load_smtp_config_from_dict
from ..adapters.smtp.sender import send_contact_email_sync

if TYPE_CHECKING:
    from ..adapters.memory.contact import ContactMailSpy
    from ..application.ports import (
        DeployConfiguration,
        DisplayConfig,
        GetConfig,
        GetDefaultConfigPath,
        InitLogging,
        LoadSmtpConfigFromDict,
        SendContactEmail,
    )

    _assert_get_config: GetConfig = get_config
    _assert_get_default_config_path: GetDefaultConfigPath = get_default_config_path
    _assert_deploy_configuration: DeployConfiguration = deploy_configuration
    _assert_display_config: DisplayConfig = display_config
    _assert_send_contact_email: SendContactEmail = send_contact_email_sync
    _assert_load_smtp_config_from_dict: LoadSmtpConfigFromDict = load_smtp_config_from_dict
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    get_default_config_path: GetDefaultConfigPath
    deploy_configuration: DeployConfiguration
    display_config: DisplayConfig
    send_contact_email: SendContactEmail
    load_smtp_config_from_dict: LoadSmtpConfigFromDict
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        get_default_config_path=get_default_config_path,
        deploy_configuration=deploy_configuration,
        display_config=display_config,
        send_contact_email=send_contact_email_sync,
        load_smtp_config_from_dict=load_smtp_config_from_dict,
        init_logging=init_logging,
    )


def build_testing(*, spy: ContactMailSpy | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        spy: Optional ContactMailSpy for capturing sends. A fresh one is
            created when None; pass your own to assert on captured sends.
    """
    from ..adapters.memory import (
        ContactMailSpy,
        deploy_configuration_in_memory,
        display_config_in_memory,
        get_config_in_memory,
        get_default_config_path_in_memory,
        init_logging_in_memory,
        load_smtp_config_from_dict_in_memory,
    )

    mail_spy = spy if spy is not None else ContactMailSpy()

    return AppServices(
        get_config=get_config_in_memory,
        get_default_config_path=get_default_config_path_in_memory,
        deploy_configuration=deploy_configuration_in_memory,
        display_config=display_config_in_memory,
        send_contact_email=mail_spy.send_contact_email,
        load_smtp_config_from_dict=load_smtp_config_from_dict_in_memory,
        init_logging=init_logging_in_memory,
    )


__all__ = [
    "get_config",
    "get_default_config_path",
    "deploy_configuration",
    "display_config",
    "send_contact_email_sync",
    "load_smtp_config_from_dict",
    "init_logging",
    "AppServices",
    "build_production",
    "build_testing",
]
