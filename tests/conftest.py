"""Shared pytest fixtures for SMTP, configuration and CLI tests.

All shared fixtures live here; tests pick them up through conftest discovery.
Async code is driven with ``asyncio.run`` from plain test functions.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from scholarsite_mail.adapters.memory.smtp import FakeConnector, FakeSmtpServer
from scholarsite_mail.adapters.smtp.config import SmtpConfig
from scholarsite_mail.domain.inquiry import ContactInquiry

if TYPE_CHECKING:
    from scholarsite_mail.adapters.memory.contact import ContactMailSpy
    from scholarsite_mail.composition import AppServices


def _load_dotenv() -> None:
    """Load .env file when it exists for local configuration."""
    from dotenv import load_dotenv

    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_dotenv()

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

SMTP_ENV_VARS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_SECURE",
    "CONTACT_RECIPIENT",
    "CONTACT_FROM_EMAIL",
)


@pytest.fixture(autouse=True)
def isolate_smtp_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real SMTP_* / CONTACT_* variables out of every test."""
    for name in SMTP_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test."""
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return ANSI_ESCAPE_PATTERN.sub("", value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}
    try:
        yield
    finally:
        for name, value in snapshot.items():
            setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before the test."""
    from scholarsite_mail.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts without filesystem I/O."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


# ======================== Domain / SMTP fixtures ========================


@pytest.fixture
def jane_inquiry() -> ContactInquiry:
    """Minimal inquiry with only the required fields."""
    return ContactInquiry(
        full_name="Jane Doe",
        email="jane@uni.edu",
        plan_interest="pro",
        biography="ML researcher",
    )


@pytest.fixture
def full_inquiry() -> ContactInquiry:
    """Inquiry with every optional field populated."""
    return ContactInquiry(
        full_name="Ada Lovelace",
        email="ada@analytical.org",
        plan_interest="institution",
        biography="Works on analytical engines.\nSecond line of context.",
        institution="University of London",
        role="Research Fellow",
        research_field="Mathematics",
        openalex_id="A5023888391",
        estimated_profiles="25",
    )


@pytest.fixture
def smtp_config() -> SmtpConfig:
    """Complete implicit-TLS configuration."""
    return SmtpConfig(
        host="smtp.test.com",
        username="bot@test.com",
        password="s3cret",
        recipient="info@scholar.name",
    )


@pytest.fixture
def starttls_config(smtp_config: SmtpConfig) -> SmtpConfig:
    """Complete STARTTLS configuration (``secure=False``)."""
    return SmtpConfig.model_validate({**smtp_config.model_dump(), "secure": False})


@pytest.fixture
def fake_connector() -> FakeConnector:
    """Connector backed by a fake server that accepts everything."""
    return FakeConnector(server=FakeSmtpServer())


@pytest.fixture
def connector_with_replies() -> Callable[..., FakeConnector]:
    """Return a factory building a connector whose server overrides some replies.

    Example:
        def test_rejected(connector_with_replies):
            connector = connector_with_replies({"MAIL FROM": "550 denied"})
    """

    def _factory(overrides: dict[str, str | None], *, chunk_size: int | None = None) -> FakeConnector:
        return FakeConnector(server=FakeSmtpServer.with_replies(overrides, chunk_size=chunk_size))

    return _factory


# ======================== CLI fixtures ========================


@dataclass
class ContactCliContext:
    """Services factory plus the spy that captures sends.

    Attributes:
        factory: Callable that returns wired AppServices for CLI invocation.
        spy: ContactMailSpy for asserting on sent inquiries.
    """

    factory: Callable[[], Any]
    spy: ContactMailSpy


@pytest.fixture
def contact_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], ContactCliContext]:
    """Create CLI test context from an ``[smtp]`` section dict.

    Uses the production logging initializer so commands run with the real
    lib_log_rich runtime, and a ContactMailSpy instead of the SMTP sender.

    Example:
        def test_send(cli_runner, contact_cli_context):
            ctx = contact_cli_context({"host": "smtp.test.com", "username": "u@test.com", "password": "pw"})
            result = cli_runner.invoke(cli, ["send-contact", ...], obj=ctx.factory)
            assert ctx.spy.sent
    """
    from scholarsite_mail.adapters.memory import load_smtp_config_from_dict_in_memory
    from scholarsite_mail.adapters.memory.contact import ContactMailSpy as ContactMailSpyImpl
    from scholarsite_mail.composition import AppServices, build_production

    def _create(smtp_data: dict[str, Any]) -> ContactCliContext:
        spy = ContactMailSpyImpl()
        config = Config({"smtp": smtp_data}, {})
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = AppServices(
            get_config=_fake_get_config,
            get_default_config_path=prod.get_default_config_path,
            deploy_configuration=prod.deploy_configuration,
            display_config=prod.display_config,
            send_contact_email=spy.send_contact_email,
            load_smtp_config_from_dict=load_smtp_config_from_dict_in_memory,
            init_logging=prod.init_logging,
        )
        return ContactCliContext(factory=lambda: test_services, spy=spy)

    return _create


@pytest.fixture
def config_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Create a services factory whose get_config returns the given data."""
    from scholarsite_mail.composition import AppServices, build_production

    def _create(data: dict[str, Any]) -> Callable[[], AppServices]:
        config = Config(data, {})
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = AppServices(
            get_config=_fake_get_config,
            get_default_config_path=prod.get_default_config_path,
            deploy_configuration=prod.deploy_configuration,
            display_config=prod.display_config,
            send_contact_email=prod.send_contact_email,
            load_smtp_config_from_dict=prod.load_smtp_config_from_dict,
            init_logging=prod.init_logging,
        )
        return lambda: test_services

    return _create
