#!/usr/bin/env python3
"""
Command plugin discovery for the UK Repeater Bot
Finds *_command.py modules, checks each command class and instantiates it
against the host
"""

import importlib
import inspect
from pathlib import Path
from typing import Dict, List, Optional, Type

from .commands.base_command import BaseCommand

PLUGIN_SUFFIX = "_command"
EXCLUDED_MODULES = frozenset({"base_command"})


class PluginLoader:
    """Loads command plugins from the commands package"""

    def __init__(self, bot, commands_dir: Optional[str] = None):
        self.bot = bot
        self.logger = bot.logger
        self.commands_dir = Path(commands_dir) if commands_dir else Path(__file__).parent / 'commands'
        self.commands_package = f"{__package__}.commands"
        self.loaded_plugins: Dict[str, BaseCommand] = {}
        self._failed_plugins: Dict[str, str] = {}  # module name -> reason

    def discover_plugins(self) -> List[str]:
        """List command module names in the commands directory, sorted"""
        if not self.commands_dir.is_dir():
            self.logger.error(f"Commands directory does not exist: {self.commands_dir}")
            return []

        modules = [
            path.stem for path in sorted(self.commands_dir.glob(f"*{PLUGIN_SUFFIX}.py"))
            if path.stem not in EXCLUDED_MODULES
        ]
        self.logger.info(f"Discovered {len(modules)} command module(s): {modules}")
        return modules

    def _find_command_class(self, module) -> Optional[Type[BaseCommand]]:
        """Get the BaseCommand subclass defined in a module, if any"""
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if issubclass(obj, BaseCommand) and obj is not BaseCommand and obj.__module__ == module.__name__:
                return obj
        return None

    def _validate_plugin(self, command_class: Type[BaseCommand]) -> List[str]:
        """
        Check a command class before it is instantiated.

        Returns:
            List of problems (empty if the class is usable)
        """
        problems = []

        execute = getattr(command_class, 'execute', None)
        if execute is None:
            problems.append("Missing required attribute: execute")
        elif not inspect.iscoroutinefunction(execute):
            problems.append("Plugin 'execute' method must be async")

        keywords = getattr(command_class, 'keywords', None)
        if keywords is not None and not isinstance(keywords, list):
            problems.append("Plugin 'keywords' must be a list")

        return problems

    def _validate_plugin_instance(self, command: BaseCommand) -> List[str]:
        """
        Check an instantiated command can be registered under a trigger.

        Returns:
            List of problems (empty if the command is usable)
        """
        problems = []

        if not getattr(command, 'name', None):
            problems.append("Plugin 'name' attribute is empty or not set")

        keywords = getattr(command, 'keywords', None)
        if keywords is None:
            problems.append("Plugin 'keywords' attribute is missing")
        elif not isinstance(keywords, list):
            problems.append("Plugin 'keywords' must be a list")
        elif not keywords:
            problems.append("Plugin 'keywords' is empty; commands need a trigger word")

        return problems

    def _fail(self, module_name: str, reason: str) -> None:
        self.logger.error(f"Failed to load plugin '{module_name}': {reason}")
        self._failed_plugins[module_name] = reason

    def load_plugin(self, module_name: str) -> Optional[BaseCommand]:
        """Import a command module and instantiate its command.

        A command whose constructor raises (for example because its config
        section is incomplete) is recorded as failed rather than loaded.

        Args:
            module_name: Module file name without the .py extension.

        Returns:
            The command instance, or None if it could not be loaded.
        """
        try:
            module = importlib.import_module(f"{self.commands_package}.{module_name}")
        except Exception as e:
            self._fail(module_name, str(e))
            return None

        command_class = self._find_command_class(module)
        if command_class is None:
            self._fail(module_name, f"No valid command class found in {module_name}")
            return None

        problems = self._validate_plugin(command_class)
        if problems:
            self._fail(module_name, f"Plugin validation failed: {', '.join(problems)}")
            return None

        try:
            command = command_class(self.bot)
        except Exception as e:
            self._fail(module_name, str(e))
            return None

        problems = self._validate_plugin_instance(command)
        if problems:
            self._fail(module_name, f"Plugin instance validation failed: {', '.join(problems)}")
            return None

        self.logger.info(f"Loaded command /{command.name} from {module_name}")
        return command

    def load_all_plugins(self) -> Dict[str, BaseCommand]:
        """Load every discovered command, keyed by command name"""
        self.loaded_plugins = {}
        for module_name in self.discover_plugins():
            command = self.load_plugin(module_name)
            if command is None:
                continue
            self.loaded_plugins[command.name] = command

        self.logger.info(f"Loaded {len(self.loaded_plugins)} command(s): {list(self.loaded_plugins)}")
        if self._failed_plugins:
            self.logger.warning(f"{len(self._failed_plugins)} command module(s) failed to load: {list(self._failed_plugins)}")

        return self.loaded_plugins

    def get_failed_plugins(self) -> Dict[str, str]:
        """Get a copy of module name -> failure reason"""
        return dict(self._failed_plugins)
