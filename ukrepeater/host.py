#!/usr/bin/env python3
"""
Host functionality for the UK Repeater Bot
Contains the host interface commands are registered with, and the
config-file driven host used by the console launcher
"""

import configparser
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

import colorlog

from .commands.base_command import BaseCommand
from .models import CommandArgs, CommandResponse
from .plugin_loader import PluginLoader

UNKNOWN_COMMAND = "Unknown command"
COMMAND_FAILED = "Sorry, that command failed. Try again later!"


class Host(ABC):
    """What a command needs from the chat platform it is plugged into"""

    logger: logging.Logger

    @abstractmethod
    def register_command(self, command: BaseCommand) -> None:
        """Register a command under each of its trigger keywords"""

    @abstractmethod
    def get_config(self) -> configparser.ConfigParser:
        """Get the plugin configuration"""


class BotHost(Host):
    """Config-file driven host.

    Loads config.ini, sets up logging, discovers command plugins and routes
    each invocation to the command registered for its trigger word.
    """

    def __init__(self, config_file: str = "config.ini"):
        self.config_file = config_file
        self.config = configparser.ConfigParser()
        self.load_config()
        self.bot_name = self.config.get('Bot', 'bot_name', fallback='UKRepeaterBot')

        # Setup logging
        self.setup_logging()

        self.start_time = time.time()
        self.commands: Dict[str, BaseCommand] = {}  # trigger -> command
        self.plugin_loader: Optional[PluginLoader] = None

    @property
    def bot_root(self) -> Path:
        """Get bot root directory (where config.ini is located)"""
        return Path(self.config_file).parent.resolve()

    def get_config(self) -> configparser.ConfigParser:
        return self.config

    def load_config(self) -> None:
        """Load configuration from file.

        Reads the configuration file specified in self.config_file. If the file
        does not exist, a default configuration is created first.
        """
        if not Path(self.config_file).exists():
            self.create_default_config()

        self.config.read(self.config_file, encoding="utf-8")

    def create_default_config(self) -> None:
        """Create default configuration file.

        Writes a default 'config.ini' file to disk with standard settings
        and comments explaining each option.
        """
        default_config = """[Bot]
# Bot name for identification and logging
bot_name = UKRepeaterBot

[UKRepeater_Command]
# Enable/disable the ukrepeater command
enabled = true

# Base URL of the repeater directory API (no trailing slash needed)
api = https://api.ukrepeater.net/v1

# Minimum seconds between requests asking the API to refresh its database
refresh = 86400

# Send a refresh before the first lookup after startup
# false: wait a full refresh interval from startup before the first refresh
refresh_on_start = true

# Allow "ukrepeater reload" (any query starting "re") to force a refresh
refresh_command = false

# Request timeout in seconds (0 = library default, no timeout)
timeout = 0

# Maximum pooled connections to the API
pool_maxsize = 10

[Logging]
# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
log_level = INFO

# Colored console output
colored_output = true

# Log file path (leave empty for console only)
log_file =
"""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            f.write(default_config)
        print(f"Created default config file: {self.config_file}")

    def setup_logging(self) -> None:
        """Setup logging configuration.

        Configures console and file handlers, formatters and log level from
        the [Logging] section. If it is missing, logs to the console at INFO.
        """
        if self.config.has_section('Logging'):
            level_name = self.config.get('Logging', 'log_level', fallback='INFO').upper()
            log_level = getattr(logging, level_name, logging.INFO)
            colored_output = self.config.getboolean('Logging', 'colored_output', fallback=True)
            log_file = self.config.get('Logging', 'log_file', fallback='')
        else:
            log_level = logging.INFO
            colored_output = True
            log_file = ''

        # Create formatter
        if colored_output:
            formatter = colorlog.ColoredFormatter(
                '%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        self.logger = logging.getLogger('UKRepeaterBot')
        self.logger.setLevel(log_level)

        # Clear any existing handlers to prevent duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        log_file = log_file.strip() if log_file else ''
        if not log_file:
            self.logger.debug("No log file specified, using console logging only")
        else:
            log_path = Path(log_file)
            if not log_path.is_absolute():
                log_path = self.bot_root / log_path
            try:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_path)
                file_handler.setFormatter(formatter)
                self.logger.addHandler(file_handler)
            except OSError as e:
                self.logger.warning(f"Could not open log file {log_path}: {e}. Using console logging only.")

        # Prevent propagation to root logger to avoid duplicate output
        self.logger.propagate = False

        self.logger.info(f"Logging configured - {self.bot_name}: {logging.getLevelName(log_level)}")

    def load_commands(self) -> Dict[str, BaseCommand]:
        """Discover command plugins and register every one that loads"""
        self.plugin_loader = PluginLoader(self)
        for command in self.plugin_loader.load_all_plugins().values():
            self.register_command(command)
        return self.commands

    def register_command(self, command: BaseCommand) -> None:
        for keyword in command.keywords:
            trigger = keyword.lower()
            if trigger in self.commands and self.commands[trigger] is not command:
                self.logger.warning(f"Trigger '/{trigger}' already registered, replacing with {command.name}")
            self.commands[trigger] = command
            self.logger.info(f"Registered command /{trigger}")

    def get_help(self, trigger: Optional[str] = None) -> str:
        """Get help for one trigger, or a list of available triggers"""
        if trigger:
            command = self.commands.get(trigger.lstrip('/').lower())
            if command is None:
                return UNKNOWN_COMMAND
            examples = command.get_usage_info()['examples']
            if not examples:
                return command.get_help_text()
            return f"{command.get_help_text()}\nExamples: {', '.join(examples)}"
        return f"{self.bot_name} commands: " + ", ".join(f"/{t}" for t in self.available_triggers())

    def available_triggers(self) -> List[str]:
        return sorted(self.commands)

    async def execute_command(self, args: CommandArgs) -> CommandResponse:
        """Route an invocation to the command registered for its trigger.

        Always returns exactly one response; a command failure is logged and
        answered with a generic message.
        """
        command = self.commands.get(args.trigger)
        if command is None or not command.can_execute(args):
            return CommandResponse(text=UNKNOWN_COMMAND)

        try:
            return await command.execute(args)
        except Exception as e:
            self.logger.error(f"Command /{args.trigger} failed: {e}", exc_info=True)
            return CommandResponse(text=COMMAND_FAILED)

    def stop(self) -> None:
        """Release resources held by registered commands"""
        for command in set(self.commands.values()):
            close = getattr(command, 'close', None)
            if callable(close):
                try:
                    close()
                except Exception as e:
                    self.logger.warning(f"Error closing command {command.name}: {e}")
        self.logger.info(f"Host stopped after {time.time() - self.start_time:.0f}s")
