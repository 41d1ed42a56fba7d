"""
Command-line interface for sync validation.

Available commands:
- validate: compare a synced table with its source and report the lag
"""

import sys

from src.utils.logging import configure_from_env, setup_logging

from .commands import cmd_validate
from .credentials import get_hive_config
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the sync-validate CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.log_json or args.log_file:
        setup_logging(
            level=args.log_level or "INFO",
            log_file=args.log_file,
            json_format=args.log_json,
        )
    else:
        configure_from_env(level=args.log_level)

    if args.command == 'validate':
        cmd_validate(args)
    else:
        parser.print_help()
        sys.exit(1)


__all__ = [
    'main',
    'cmd_validate',
    'create_parser',
    'get_hive_config',
]


if __name__ == '__main__':
    main()
