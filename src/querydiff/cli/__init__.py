"""
Command-line interface for querydiff.

Available commands:
- run: Compare a query's result on SQL Server and PostgreSQL
- render: Render a JSON report saved by a previous run
"""

import sys

from ..utils.logging import setup_logging
from ..utils.tracing import initialize_tracing, shutdown_tracing
from .commands import cmd_render, cmd_run
from .parser import create_parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the querydiff CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
        json_format=args.log_json,
    )
    if args.otlp_endpoint:
        initialize_tracing(otlp_endpoint=args.otlp_endpoint)

    try:
        if args.command == 'run':
            cmd_run(args)
        elif args.command == 'render':
            cmd_render(args)
        else:
            parser.print_help()
            sys.exit(2)
    finally:
        shutdown_tracing()


__all__ = [
    'main',
    'cmd_run',
    'cmd_render',
    'create_parser',
]


if __name__ == '__main__':
    main()
