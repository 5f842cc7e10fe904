#!/usr/bin/env python3
"""
UK Repeater command for the UK Repeater Bot
Searches the UKRepeater.net directory by callsign or locator and
generates APRS-IS passcodes
"""

import asyncio
import traceback
from typing import List, Optional

from .base_command import BaseCommand
from ..aprs import format_passcode_reply
from ..classifier import build_prefix_table, classify
from ..errors import FetchError, InputTooShortError, InvalidArgumentError, RefreshFailedError, RepeaterBotError
from ..lookup import LookupContext, RepeaterLookup
from ..models import CommandArgs, CommandResponse


class UKRepeaterCommand(BaseCommand):
    """Handles repeater directory lookups and APRS passcode requests"""

    # Plugin metadata
    name = "ukrepeater"
    keywords = ['ukrepeater']
    description = "Search the UKRepeater.net database by callsign or locator (usage: ukrepeater gb3wr)"

    # Documentation
    short_description = "Search the UKRepeater.net database or get an APRS passcode"
    usage = "ukrepeater <callsign|locator> | ukrepeater aprs <callsign>"
    examples = ["ukrepeater gb3wr", "ukrepeater io91wm", "ukrepeater aprs m0abc"]
    parameters = [
        {"name": "callsign", "description": "Repeater callsign starting GB or MB"},
        {"name": "locator", "description": "Maidenhead locator starting IO or JO"},
        {"name": "aprs", "description": "APRS followed by your callsign for an APRS-IS passcode"}
    ]

    # Input limits
    MIN_COMMAND_LENGTH = 14
    MAX_ARGUMENT_LENGTH = 6
    APRS_KEYWORD = "APRS"

    UNEXPECTED_ERROR = "Sorry, something went wrong looking that up!"

    def __init__(self, bot, repeater_lookup: Optional[RepeaterLookup] = None):
        """Initialize the ukrepeater command.

        Args:
            bot: The host the command is registered with.
            repeater_lookup: Lookup service to use; built from config if not given.
        """
        super().__init__(bot)

        if repeater_lookup is None:
            context = LookupContext.from_config(self.config, self.config_section)
            repeater_lookup = RepeaterLookup(context, logger=self.logger)
        self.repeater_lookup = repeater_lookup
        self.prefix_table = build_prefix_table(repeater_lookup.context.refresh_command)

    def get_help_text(self) -> str:
        """Get help text for the ukrepeater command"""
        return f"Usage: {self.usage} - {self.short_description}"

    async def execute(self, args: CommandArgs) -> CommandResponse:
        """Execute the ukrepeater command.

        The lookup blocks on HTTP, so it runs on the default executor.

        Args:
            args: The invocation that triggered the command.

        Returns:
            CommandResponse: Ephemeral reply with the lookup result or error text.
        """
        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, self.handle, args.command)
        return CommandResponse(text=text)

    def handle(self, command: str) -> str:
        """Answer a raw command line, converting every failure to reply text.

        Args:
            command: The full command line including the trigger word.

        Returns:
            str: The reply text.
        """
        try:
            return self._dispatch(command)
        except (RefreshFailedError, FetchError) as e:
            self.logger.warning(f"Repeater lookup failed for '{command}': {e}")
            return e.reply_text()
        except RepeaterBotError as e:
            self.logger.debug(f"Repeater lookup rejected for '{command}': {e}")
            return e.reply_text()
        except Exception as e:
            self.logger.error(f"Error in ukrepeater command: {e}")
            self.logger.error(traceback.format_exc())
            return self.UNEXPECTED_ERROR

    def _dispatch(self, command: str) -> str:
        if len(command) < self.MIN_COMMAND_LENGTH:
            raise InputTooShortError()

        fields = command.split()
        if len(fields) < 2:
            raise InputTooShortError()

        argument = fields[1]
        self.validate_argument(argument)

        if argument.upper() == self.APRS_KEYWORD:
            return self._aprs_reply(fields)

        request = classify(argument, self.prefix_table)
        self.logger.info(f"Repeater lookup: {request.query} ({request.kind.name})")
        return self.repeater_lookup.lookup(request)

    def validate_argument(self, argument: str) -> None:
        """Check the argument is 1-6 letters or digits.

        Raises:
            InvalidArgumentError: If it is not.
        """
        if not 1 <= len(argument) <= self.MAX_ARGUMENT_LENGTH:
            raise InvalidArgumentError()
        if not all(ch.isalpha() or ch.isdecimal() for ch in argument):
            raise InvalidArgumentError()

    def _aprs_reply(self, fields: List[str]) -> str:
        """Reply for 'aprs <callsign>'; empty when no callsign was given"""
        if len(fields) < 3:
            return ""
        return format_passcode_reply(fields[2])

    def close(self) -> None:
        """Log refresh statistics and close the API client's connections"""
        stats = self.repeater_lookup.throttle.get_stats()
        self.logger.info(
            f"Repeater API refreshes: {stats['total_refreshes']} sent, {stats['total_skipped']} skipped, "
            f"next due in {stats['time_until_next']:.0f}s"
        )
        self.repeater_lookup.client.close()
