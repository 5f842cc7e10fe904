#!/usr/bin/env python3
"""
Configuration validation for UK Repeater Bot config.ini.

Checks the required sections, the repeater API settings and the logging
settings, and flags sections the bot does not read. Used by
validate_config.py and by the launcher's --validate-config flag.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"

Result = Tuple[str, str]

COMMAND_SECTION = "UKRepeater_Command"

KNOWN_SECTIONS = frozenset({"Bot", "Logging", COMMAND_SECTION})

# Without these the bot cannot answer lookups
REQUIRED_SECTIONS = frozenset({"Bot", COMMAND_SECTION})

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

BOOLEAN_KEYS = ("enabled", "refresh_on_start", "refresh_command")

# Misspelt section name -> the section the bot actually reads
SECTION_TYPO_MAP = {
    "UKRepeater": COMMAND_SECTION,
    "Ukrepeater_Command": COMMAND_SECTION,
    "Repeater_Command": COMMAND_SECTION,
}


def _resolve_path(file_path: str, base_dir: Path) -> Path:
    """Resolve file_path against base_dir unless it is already absolute."""
    path = Path(file_path)
    if not path.is_absolute():
        path = base_dir.resolve() / path
    return path.resolve()


def _check_path_writable(file_path: str, base_dir: Path, description: str) -> Optional[str]:
    """Return a warning if file_path could not be written, else None."""
    file_path = (file_path or "").strip()
    if not file_path:
        return None
    try:
        resolved = _resolve_path(file_path, base_dir)
    except (OSError, RuntimeError):
        return f"{description}: cannot resolve path '{file_path}'"

    # Missing directories are created at startup, so test the nearest existing one
    existing = resolved.parent
    while not existing.exists():
        if existing == existing.parent:
            return f"{description} '{resolved}': parent directory does not exist"
        existing = existing.parent

    if not os.access(str(existing), os.W_OK):
        return f"{description} '{resolved}': directory {existing} is not writable"
    if resolved.exists() and not os.access(str(resolved), os.W_OK):
        return f"{description} '{resolved}': file exists but is not writable"
    return None


def _validate_command_section(config: configparser.ConfigParser) -> List[Result]:
    """Validate the repeater API settings."""
    results: List[Result] = []

    api = config.get(COMMAND_SECTION, "api", fallback="").strip()
    if not api:
        results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] api is not set; lookups cannot run."))
    else:
        parsed = urlparse(api)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] api '{api}' is not an http(s) URL."))

    try:
        if config.getint(COMMAND_SECTION, "refresh", fallback=86400) <= 0:
            results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] refresh must be a positive number of seconds."))
    except ValueError:
        results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] refresh must be an integer number of seconds."))

    try:
        if config.getfloat(COMMAND_SECTION, "timeout", fallback=0) < 0:
            results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] timeout cannot be negative."))
    except ValueError:
        results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] timeout must be a number of seconds."))

    for key in BOOLEAN_KEYS:
        try:
            config.getboolean(COMMAND_SECTION, key, fallback=True)
        except ValueError:
            results.append((SEVERITY_ERROR, f"[{COMMAND_SECTION}] {key} must be true or false."))

    return results


def _validate_logging_section(config: configparser.ConfigParser, config_dir: Path) -> List[Result]:
    """Validate [Logging]; everything here has a working fallback, so nothing is an error."""
    if not config.has_section("Logging"):
        return [(SEVERITY_INFO, "Section [Logging] absent; logging to console at INFO.")]

    results: List[Result] = []
    level = config.get("Logging", "log_level", fallback="INFO").strip().upper()
    if level not in LOG_LEVELS:
        results.append((
            SEVERITY_WARNING,
            f"[Logging] log_level '{level}' is not a log level; {logging.getLevelName(logging.INFO)} will be used.",
        ))

    problem = _check_path_writable(config.get("Logging", "log_file", fallback=""), config_dir, "Log file path")
    if problem:
        results.append((SEVERITY_WARNING, problem))
    return results


def _validate_section_names(config: configparser.ConfigParser) -> List[Result]:
    """Flag misspelt and unread sections."""
    results: List[Result] = []
    for section in (s.strip() for s in config.sections()):
        if not section or section in KNOWN_SECTIONS:
            continue
        if section in SECTION_TYPO_MAP:
            results.append((
                SEVERITY_WARNING,
                f"Non-standard section [{section}]; did you mean [{SECTION_TYPO_MAP[section]}]?",
            ))
        elif not section.endswith("_Command"):
            results.append((
                SEVERITY_INFO,
                f"Unknown section [{section}] (not read by the bot and not a *_Command section).",
            ))
    return results


def validate_config(config_path: str) -> List[Result]:
    """
    Validate a config file.

    Args:
        config_path: Path to config.ini (or other config file).

    Returns:
        List of (severity, message). severity is one of SEVERITY_*.
    """
    path = Path(config_path)
    if not path.exists():
        return [(SEVERITY_ERROR, f"Config file not found: {config_path}")]

    config = configparser.ConfigParser()
    try:
        config.read(config_path, encoding="utf-8")
    except configparser.Error as e:
        return [(SEVERITY_ERROR, f"Failed to parse config: {e}")]

    present = {s.strip() for s in config.sections()}
    results: List[Result] = [
        (SEVERITY_ERROR, f"Missing required section [{section}]; bot will not start without it.")
        for section in sorted(REQUIRED_SECTIONS - present)
    ]

    if config.has_section(COMMAND_SECTION):
        results.extend(_validate_command_section(config))
    results.extend(_validate_logging_section(config, path.resolve().parent))
    results.extend(_validate_section_names(config))
    return results
