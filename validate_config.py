#!/usr/bin/env python3
"""
Check a UK Repeater Bot config file without starting the bot.

Usage: python validate_config.py [--config config.ini]
Exit code is 1 when any error is reported. Warnings and info lines are
printed but leave the exit code at 0.
"""

import argparse
import sys

from ukrepeater.config_validation import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARNING,
    validate_config,
)

SEVERITY_LABELS = {
    SEVERITY_ERROR: "Error",
    SEVERITY_WARNING: "Warning",
    SEVERITY_INFO: "Info",
}


def report(results) -> int:
    """Print (severity, message) results to stderr and return the exit code"""
    for severity, message in results:
        print(f"{SEVERITY_LABELS.get(severity, 'Info')}: {message}", file=sys.stderr)
    errors = sum(1 for severity, _ in results if severity == SEVERITY_ERROR)
    return 1 if errors else 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Check a UK Repeater Bot config file")
    parser.add_argument(
        "--config",
        default="config.ini",
        help="Config file to check (default: config.ini)",
    )
    args = parser.parse_args()
    return report(validate_config(args.config))


if __name__ == "__main__":
    sys.exit(main())
