"""
Command-line argument parser configuration.
"""

import argparse

from ..config import DEFAULT_HTML_OUTPUT, DEFAULT_WORKERS, DuplicatePolicy


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="querydiff",
        description="Compare the result of a query on SQL Server and PostgreSQL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare by key columns
  querydiff run -m "$MSSQL" -p "$PGSQL" -q "SELECT * FROM customers" \\
      --mssql-keycolumns id --pgsql-keycolumns id

  # Parameters, with a PostgreSQL-specific query
  querydiff run -m "$MSSQL" -p "$PGSQL" \\
      -q "SELECT TOP 100 * FROM orders WHERE region = @region" \\
      --pgsql-query "SELECT * FROM orders WHERE region = @region LIMIT 100" \\
      --mssql-parameters "region=EU"

  # Keep a JSON report and render it again later
  querydiff run -m "$MSSQL" -p "$PGSQL" -q "SELECT * FROM t" --json-output report.json
  querydiff render --input report.json --format html --output report.html
        """
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='WARNING',
        help='Logging level (default: WARNING)'
    )
    parser.add_argument(
        '--log-json',
        action='store_true',
        help='Log JSON lines instead of text'
    )
    parser.add_argument(
        '--log-file',
        help='Also log to this file (rotated)'
    )
    parser.add_argument(
        '--otlp-endpoint',
        help='Export traces to this OTLP collector (default: $OTLP_ENDPOINT)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========== Run command ==========
    run_parser = subparsers.add_parser('run', help='Run both queries and compare the results')
    run_parser.add_argument(
        '-m', '--mssql-connection',
        help='SQL Server ODBC connection string (default: $QUERYDIFF_MSSQL_CONNECTION)'
    )
    run_parser.add_argument(
        '-q', '--mssql-query',
        required=True,
        help='SQL Server query'
    )
    run_parser.add_argument(
        '--mssql-parameters',
        help='SQL Server query parameters, e.g. "id=5;name=x"'
    )
    run_parser.add_argument(
        '--mssql-keycolumns',
        help='Comma-separated SQL Server key columns'
    )
    run_parser.add_argument(
        '-p', '--pgsql-connection',
        help='PostgreSQL connection string (default: $QUERYDIFF_PGSQL_CONNECTION)'
    )
    run_parser.add_argument(
        '--pgsql-query',
        help='PostgreSQL query (default: the SQL Server query)'
    )
    run_parser.add_argument(
        '--pgsql-parameters',
        help='PostgreSQL query parameters (default: the SQL Server parameters)'
    )
    run_parser.add_argument(
        '--pgsql-keycolumns',
        help='Comma-separated PostgreSQL key columns'
    )
    run_parser.add_argument(
        '--html-output',
        default=DEFAULT_HTML_OUTPUT,
        help=f'HTML report path, written when the results differ (default: {DEFAULT_HTML_OUTPUT})'
    )
    run_parser.add_argument(
        '--json-output',
        help='Also save the full result as JSON'
    )
    run_parser.add_argument(
        '--csv-output',
        help='Also save the differing rows as CSV'
    )
    run_parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable ANSI colors in console output'
    )
    run_parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a summary with recommendations after the rows'
    )
    run_parser.add_argument(
        '--duplicates',
        choices=[p.value for p in DuplicatePolicy],
        default=DuplicatePolicy.LAST_WINS.value,
        help='How rows sharing a key are matched (default: last_wins)'
    )
    run_parser.add_argument(
        '--partitions',
        type=int,
        default=1,
        help='Hash partitions matched in parallel (default: 1, sequential)'
    )
    run_parser.add_argument(
        '--workers',
        type=int,
        default=DEFAULT_WORKERS,
        help=f'Worker threads for partitioned matching (default: {DEFAULT_WORKERS})'
    )
    run_parser.add_argument(
        '--timeout',
        type=float,
        help='Matching timeout in seconds'
    )
    run_parser.add_argument(
        '--metrics-port',
        type=int,
        help='Expose Prometheus metrics on this port while running'
    )

    # ========== Render command ==========
    render_parser = subparsers.add_parser('render', help='Render a saved JSON report')
    render_parser.add_argument(
        '--input',
        required=True,
        help='JSON report written by "run --json-output"'
    )
    render_parser.add_argument(
        '--format',
        choices=['console', 'html', 'csv', 'summary'],
        default='console',
        help='Output format (default: console)'
    )
    render_parser.add_argument(
        '--output',
        help='Output file (required for html and csv)'
    )
    render_parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable ANSI colors in console output'
    )

    return parser
