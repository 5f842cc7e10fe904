#!/usr/bin/env python3
"""
Base command class for all UK Repeater Bot commands
Provides common functionality and interface for command implementations
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..models import CommandArgs, CommandResponse


class BaseCommand(ABC):
    """Base class for all bot commands - Plugin Interface.

    This class defines the interface that all commands must implement. It provides
    common functionality for configuration loading, help text and the usage
    information the host shows in help replies.
    """

    # Plugin metadata - to be overridden by subclasses
    name: str = ""
    keywords: List[str] = []  # All trigger words for this command (including name and aliases)
    description: str = ""

    # Documentation fields - to be overridden by subclasses
    short_description: str = ""  # Brief description (without usage syntax)
    usage: str = ""  # Usage syntax, e.g., "ukrepeater <callsign|locator>"
    examples: List[str] = []  # Example commands, e.g., ["ukrepeater gb3wr"]
    parameters: List[Dict[str, str]] = []  # Parameter definitions, e.g., [{"name": "callsign", "description": "..."}]

    def __init__(self, bot):
        self.bot = bot
        self.logger = bot.logger
        self.config = bot.get_config()
        self.config_section = self._derive_config_section_name()
        self.enabled = self.get_config_value(self.config_section, 'enabled', fallback=True, value_type='bool')

    def get_config_value(self, section: str, key: str, fallback: Any = None, value_type: str = 'str') -> Any:
        """Get a typed config value.

        Args:
            section: Config section name.
            key: Config key name.
            fallback: Default value if not found.
            value_type: Type of value ('str', 'bool', 'int', 'float', 'list').

        Returns:
            Any: Config value of appropriate type, or fallback if not found or unparsable.
        """
        if not self.config.has_section(section) or not self.config.has_option(section, key):
            return fallback

        try:
            if value_type == 'bool':
                return self.config.getboolean(section, key)
            if value_type == 'int':
                return self.config.getint(section, key)
            if value_type == 'float':
                return self.config.getfloat(section, key)
            raw_value = self.config.get(section, key)
            if value_type == 'list':
                # Parse comma-separated list
                return [item.strip() for item in raw_value.split(',') if item.strip()]
            if value_type != 'str':
                self.logger.warning(f"Unknown value_type '{value_type}' for {section}.{key}, returning as string")
            return raw_value
        except (ValueError, TypeError) as e:
            self.logger.debug(f"Config conversion error for {section}.{key}: {e}")
            return fallback

    @abstractmethod
    async def execute(self, args: CommandArgs) -> CommandResponse:
        """Execute the command with the given invocation.

        Args:
            args: The invocation that triggered the command.

        Returns:
            CommandResponse: The single reply for the invocation.
        """
        pass

    def can_execute(self, args: CommandArgs) -> bool:
        """Check if this command can be executed for the given invocation"""
        return bool(self.enabled)

    def get_help_text(self) -> str:
        """Get help text for this command.

        Returns:
            str: The help text (description) for this command.
        """
        return self.description or "No help available for this command."

    def get_usage_info(self) -> Dict[str, Any]:
        """Get structured usage information.

        Returns:
            Dict with keys 'description', 'short_description', 'usage',
            'examples' and 'parameters'.
        """
        return {
            'description': self.description or "No description available",
            'short_description': self.short_description or "",
            'usage': self.usage or "",
            'examples': list(self.examples) if self.examples else [],
            'parameters': list(self.parameters) if self.parameters else []
        }

    def _derive_config_section_name(self) -> str:
        """Derive config section name from command name.

        Handles names with fixed capitalisation like "ukrepeater" -> "UKRepeater_Command"
        Regular names like "help" -> "Help_Command"

        Returns:
            str: The derived config section name.
        """
        camel_case_map = {
            'ukrepeater': 'UKRepeater',
        }

        base_name = camel_case_map.get(self.name, self.name.title())
        return f"{base_name}_Command"
