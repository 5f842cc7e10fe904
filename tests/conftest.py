#!/usr/bin/env python3
"""
Pytest fixtures for UK Repeater Bot tests
"""

import configparser
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from ukrepeater.host import Host
from ukrepeater.lookup import LookupContext, RepeaterLookup
from ukrepeater.rate_limiter import RefreshThrottle
from tests.helpers import TEST_API_URL, FakeAPIClient, FakeClock


class FakeHost(Host):
    """Host test double: keeps registered commands in a dict"""

    def __init__(self, config: configparser.ConfigParser, logger):
        self.config = config
        self.logger = logger
        self.registered: Dict[str, Any] = {}

    def register_command(self, command) -> None:
        for keyword in command.keywords:
            self.registered[keyword.lower()] = command

    def get_config(self) -> configparser.ConfigParser:
        return self.config


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    logger = Mock()
    logger.info = Mock()
    logger.debug = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    return logger


@pytest.fixture
def minimal_config():
    """Minimal ConfigParser for command tests (Bot, UKRepeater_Command)."""
    config = configparser.ConfigParser()
    config.add_section("Bot")
    config.set("Bot", "bot_name", "TestBot")
    config.add_section("UKRepeater_Command")
    config.set("UKRepeater_Command", "enabled", "true")
    config.set("UKRepeater_Command", "api", TEST_API_URL)
    config.set("UKRepeater_Command", "refresh", "86400")
    return config


@pytest.fixture
def command_mock_bot(mock_logger, minimal_config):
    """Host test double for command tests. No network, no plugin loading."""
    return FakeHost(minimal_config, mock_logger)


@pytest.fixture
def fake_clock():
    return FakeClock(start=1_700_000_000.0)


@pytest.fixture
def fake_client():
    return FakeAPIClient()


@pytest.fixture
def lookup_context():
    return LookupContext(base_url=TEST_API_URL, refresh_interval=86400)


@pytest.fixture
def repeater_lookup(lookup_context, fake_client, fake_clock, mock_logger):
    """RepeaterLookup wired to a fake client and a controllable clock."""
    throttle = RefreshThrottle(
        interval_seconds=lookup_context.refresh_interval,
        refresh_on_start=lookup_context.refresh_on_start,
        clock=fake_clock
    )
    return RepeaterLookup(lookup_context, client=fake_client, throttle=throttle, logger=mock_logger)
