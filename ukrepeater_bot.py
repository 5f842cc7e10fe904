#!/usr/bin/env python3
"""
UK Repeater Bot console launcher
Loads the command plugins and answers /ukrepeater commands typed on stdin
"""

import argparse
import asyncio
import sys


async def run_console(host) -> None:
    """Read one command per line from stdin and print each reply"""
    from ukrepeater.models import CommandArgs

    loop = asyncio.get_running_loop()
    print(host.get_help())
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        if line.lower() in ('quit', 'exit'):
            break
        if line.lower() in ('help', '/help'):
            print(host.get_help())
            continue
        response = await host.execute_command(CommandArgs(command=line, user_id='console'))
        print(response.text)


def main():
    parser = argparse.ArgumentParser(
        description="UK Repeater Bot - search the UKRepeater.net directory from the command line"
    )
    parser.add_argument(
        "--config",
        default="config.ini",
        help="Path to configuration file (default: config.ini)",
    )
    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate config and exit before starting the bot (exit 1 on errors)",
    )
    parser.add_argument(
        "--command",
        help='Run a single command and exit, e.g. --command "/ukrepeater gb3wr"',
    )

    args = parser.parse_args()

    if args.validate_config:
        from ukrepeater.config_validation import validate_config
        from validate_config import report
        sys.exit(report(validate_config(args.config)))

    from ukrepeater.host import BotHost
    from ukrepeater.models import CommandArgs

    host = BotHost(config_file=args.config)
    host.load_commands()

    try:
        if args.command:
            response = asyncio.run(host.execute_command(CommandArgs(command=args.command, user_id='console')))
            print(response.text)
        else:
            asyncio.run(run_console(host))
    except KeyboardInterrupt:
        print("\nShutdown complete.")
    finally:
        host.stop()


if __name__ == "__main__":
    main()
