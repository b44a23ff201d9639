"""
Rendering and export of comparison results.

Renderers only read a DiffResult; none of them changes it.
"""

from .console import Segment, Style, render_console, to_ansi
from .formatters import (
    SavedReport,
    export_report_csv,
    export_report_json,
    format_summary_console,
    load_report_json,
)
from .generator import format_timestamp, generate_summary
from .html import HtmlCell, HtmlRow, HtmlTable, build_table, render_html, write_html_report

__all__ = [
    'Segment',
    'Style',
    'render_console',
    'to_ansi',
    'HtmlCell',
    'HtmlRow',
    'HtmlTable',
    'build_table',
    'render_html',
    'write_html_report',
    'SavedReport',
    'export_report_json',
    'load_report_json',
    'export_report_csv',
    'format_summary_console',
    'generate_summary',
    'format_timestamp',
]
