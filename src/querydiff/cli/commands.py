"""
CLI command implementations.

- run: execute both queries, compare, print and write reports
- render: re-render a JSON report saved by a previous run
"""

import argparse
import logging
import sys
from pathlib import Path

from ..config import ComparisonConfig, build_side_configs
from ..engine import compare
from ..exceptions import ComparisonTimeoutError, ConfigurationError, UpstreamExecutionError
from ..report import (
    export_report_csv,
    export_report_json,
    format_summary_console,
    generate_summary,
    load_report_json,
    render_console,
    to_ansi,
    write_html_report,
)
from ..rowset import Side
from ..sources import DBMS_MSSQL, DBMS_PGSQL, create_source
from ..utils.metrics import MetricsPublisher, get_comparison_metrics

logger = logging.getLogger(__name__)

EXIT_EQUAL = 0
EXIT_DIFFERENT = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_UPSTREAM_ERROR = 3
EXIT_TIMEOUT = 4


def cmd_run(args: argparse.Namespace) -> None:
    """
    Run both queries and compare their results

    Exits with 0 when equal, 1 when different, 2 on configuration errors,
    3 when a query fails and 4 when matching times out.

    Args:
        args: Parsed command-line arguments
    """
    try:
        left_config, right_config = build_side_configs(
            mssql_connection=args.mssql_connection,
            mssql_query=args.mssql_query,
            pgsql_connection=args.pgsql_connection,
            pgsql_query=args.pgsql_query,
            mssql_parameters=args.mssql_parameters,
            pgsql_parameters=args.pgsql_parameters,
            mssql_keycolumns=args.mssql_keycolumns,
            pgsql_keycolumns=args.pgsql_keycolumns,
        )
        config = ComparisonConfig(
            left_keys=left_config.key_columns,
            right_keys=right_config.key_columns,
            duplicates=args.duplicates,
            partitions=args.partitions,
            workers=args.workers,
            timeout_seconds=args.timeout,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIGURATION_ERROR)

    if args.metrics_port:
        MetricsPublisher(port=args.metrics_port).start()

    try:
        left = create_source(DBMS_MSSQL, left_config, Side.LEFT).fetch()
        right = create_source(DBMS_PGSQL, right_config, Side.RIGHT).fetch()

        print(f"Number of {left.label} rows: {len(left)}")
        print(f"Number of {right.label} rows: {len(right)}")

        result = compare(left, right, config, metrics=get_comparison_metrics())

    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIGURATION_ERROR)
    except UpstreamExecutionError as e:
        print(f"Error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_UPSTREAM_ERROR)
    except ComparisonTimeoutError as e:
        print(f"Error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_TIMEOUT)

    if result.equal:
        print("Tables are equal")
    else:
        print("Tables are not equal")
        print(to_ansi(render_console(result, left.schema, right.schema), use_colors=not args.no_color))

    summary = generate_summary(result, left.schema, right.schema, left.label, right.label)
    if args.summary:
        print(format_summary_console(summary))

    if not result.equal and args.html_output:
        _ensure_parent(args.html_output)
        write_html_report(
            result, left.schema, right.schema, args.html_output, left.label, right.label
        )

    if args.json_output:
        _ensure_parent(args.json_output)
        export_report_json(
            result, args.json_output, left.schema, right.schema, left.label, right.label, summary
        )
        logger.info(f"JSON report saved to {args.json_output}")

    if args.csv_output:
        _ensure_parent(args.csv_output)
        export_report_csv(
            result, args.csv_output, left.schema, right.schema, left.label, right.label
        )
        logger.info(f"CSV report saved to {args.csv_output}")

    sys.exit(EXIT_EQUAL if result.equal else EXIT_DIFFERENT)


def cmd_render(args: argparse.Namespace) -> None:
    """
    Render a report saved by "run --json-output"

    Args:
        args: Parsed command-line arguments
    """
    logger.info(f"Loading comparison report from {args.input}")

    try:
        saved = load_report_json(args.input)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Failed to load report: {e}")
        print(f"Error occurred: {e}", file=sys.stderr)
        sys.exit(EXIT_CONFIGURATION_ERROR)

    result = saved.result

    if args.format in ("html", "csv") and not args.output:
        logger.error(f"Output file required for {args.format} format")
        sys.exit(EXIT_CONFIGURATION_ERROR)

    if args.format == "console":
        print("Tables are equal" if result.equal else "Tables are not equal")
        if not result.equal:
            lines = render_console(result, saved.left_schema, saved.right_schema)
            print(to_ansi(lines, use_colors=not args.no_color))
    elif args.format == "summary":
        summary = saved.summary or generate_summary(
            result, saved.left_schema, saved.right_schema, saved.left_label, saved.right_label
        )
        print(format_summary_console(summary))
    elif args.format == "html":
        _ensure_parent(args.output)
        write_html_report(
            result, saved.left_schema, saved.right_schema, args.output,
            saved.left_label, saved.right_label,
        )
    elif args.format == "csv":
        _ensure_parent(args.output)
        export_report_csv(
            result, args.output, saved.left_schema, saved.right_schema,
            saved.left_label, saved.right_label,
        )
        logger.info(f"Report exported to {args.output}")

    sys.exit(EXIT_EQUAL if result.equal else EXIT_DIFFERENT)


def _ensure_parent(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
