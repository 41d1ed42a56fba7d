"""
Sync validation report rendering.

Formats:
- console: human-readable block for terminals
- json: machine-readable export
"""

from .formatters import export_report_json, format_report_console, format_report_json

__all__ = [
    'format_report_console',
    'format_report_json',
    'export_report_json',
]
