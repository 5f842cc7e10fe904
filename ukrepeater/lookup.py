#!/usr/bin/env python3
"""
Repeater lookup orchestration
Gates each lookup on the refresh throttle, then fetches, decodes and formats
"""

import configparser
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from .api_client import RepeaterAPIClient
from .errors import FetchError, RefreshFailedError
from .models import LookupKind, LookupRequest
from .rate_limiter import RefreshThrottle
from .responses import decode_repeater, decode_repeater_list, format_repeater, format_repeater_list

DEFAULT_REFRESH_SECONDS = 86400


@dataclass
class LookupContext:
    """Settings a lookup needs, read once at activation"""
    base_url: str
    refresh_interval: int = DEFAULT_REFRESH_SECONDS
    timeout: float = 0
    refresh_on_start: bool = True
    refresh_command: bool = False
    pool_maxsize: int = 10

    def __post_init__(self):
        self.base_url = self.base_url.strip().rstrip('/')

    @classmethod
    def from_config(cls, config: configparser.ConfigParser,
                    section: str = 'UKRepeater_Command') -> 'LookupContext':
        """Build a context from a config section.

        Raises:
            ValueError: If the section has no api URL or a value does not parse.
        """
        base_url = config.get(section, 'api', fallback='').strip()
        if not base_url:
            raise ValueError(f"[{section}] api is not set")
        return cls(
            base_url=base_url,
            refresh_interval=config.getint(section, 'refresh', fallback=DEFAULT_REFRESH_SECONDS),
            timeout=config.getfloat(section, 'timeout', fallback=0),
            refresh_on_start=config.getboolean(section, 'refresh_on_start', fallback=True),
            refresh_command=config.getboolean(section, 'refresh_command', fallback=False),
            pool_maxsize=config.getint(section, 'pool_maxsize', fallback=10),
        )


class RepeaterLookup:
    """Answers classified lookup requests against the repeater API.

    Holds the refresh throttle for the lifetime of the command, so one
    instance should serve every invocation.
    """

    def __init__(self, context: LookupContext, client: Optional[RepeaterAPIClient] = None,
                 throttle: Optional[RefreshThrottle] = None,
                 logger: Optional[logging.Logger] = None):
        self.context = context
        self.logger = logger or logging.getLogger('UKRepeaterBot')
        self.client = client or RepeaterAPIClient(
            timeout=context.timeout,
            pool_maxsize=context.pool_maxsize,
            logger=self.logger
        )
        self.throttle = throttle or RefreshThrottle(
            interval_seconds=context.refresh_interval,
            refresh_on_start=context.refresh_on_start
        )

    def repeater_url(self, name: str) -> str:
        return f"{self.context.base_url}/repeater/{quote(name, safe='')}"

    def locator_url(self, locator: str) -> str:
        return f"{self.context.base_url}/findbylocator/{quote(locator, safe='')}"

    def update_url(self) -> str:
        return f"{self.context.base_url}/update"

    def refresh(self) -> None:
        """Ask upstream to reload its database and record the dispatch.

        Raises:
            RefreshFailedError: If the /update call fails.
        """
        self.logger.info("Requesting repeater database refresh")
        try:
            self.client.fetch(self.update_url())
        except FetchError as e:
            raise RefreshFailedError(e) from e
        self.throttle.record_refresh()

    def refresh_if_due(self) -> bool:
        """Send a refresh if the throttle allows one. Returns True if one was sent."""
        if not self.throttle.is_due():
            return False
        self.refresh()
        return True

    def lookup(self, request: LookupRequest) -> str:
        """Answer a lookup request.

        Args:
            request: The classified request.

        Returns:
            str: Reply text; empty for an explicit refresh.

        Raises:
            RepeaterBotError: For any refresh, fetch, decode or not-found failure.
        """
        if request.kind == LookupKind.REFRESH:
            self.refresh()
            return ""

        self.refresh_if_due()

        if request.kind == LookupKind.BY_NAME:
            body = self.client.fetch(self.repeater_url(request.query))
            return format_repeater(decode_repeater(body))

        if request.kind == LookupKind.BY_LOCATOR:
            body = self.client.fetch(self.locator_url(request.query))
            return format_repeater_list(decode_repeater_list(body))

        self.logger.warning(f"Unhandled lookup kind {request.kind!r} for {request.query}")
        return ""
