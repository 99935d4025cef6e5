"""In-memory adapter implementations for testing.

Lightweight implementations of the application ports plus a scripted SMTP
server -- no filesystem, no sockets, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.contact` - ContactMailSpy and in-memory SMTP config loader
    * :mod:`.logging` - In-memory logging adapter
    * :mod:`.smtp` - FakeSmtpServer and FakeConnector
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import (
    deploy_configuration_in_memory,
    display_config_in_memory,
    get_config_in_memory,
    get_default_config_path_in_memory,
)
from .contact import ContactMailSpy, load_smtp_config_from_dict_in_memory
from .logging import init_logging_in_memory
from .smtp import FakeConnector, FakeSmtpServer, FakeStream

# Static conformance assertions
if TYPE_CHECKING:
    from scholarsite_mail.adapters.smtp.stream import Connector
    from scholarsite_mail.application.ports import (
        DeployConfiguration,
        DisplayConfig,
        GetConfig,
        GetDefaultConfigPath,
        InitLogging,
        LoadSmtpConfigFromDict,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_get_default_config_path: GetDefaultConfigPath = get_default_config_path_in_memory
    _assert_deploy_configuration: DeployConfiguration = deploy_configuration_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_load_smtp_config: LoadSmtpConfigFromDict = load_smtp_config_from_dict_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_connector: Connector = FakeConnector()

__all__ = [
    "ContactMailSpy",
    "FakeConnector",
    "FakeSmtpServer",
    "FakeStream",
    "deploy_configuration_in_memory",
    "display_config_in_memory",
    "get_config_in_memory",
    "get_default_config_path_in_memory",
    "init_logging_in_memory",
    "load_smtp_config_from_dict_in_memory",
]
