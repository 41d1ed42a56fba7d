"""
Report formatting and export utilities.

This module renders a ReconciliationResult as a console block or JSON.
"""

import json
from pathlib import Path
from typing import Any


def format_report_json(result: Any) -> str:
    """Serialize a result as indented JSON"""
    return json.dumps(result.to_dict(), indent=2)


def export_report_json(result: Any, output_path: str) -> None:
    """
    Write a result to a JSON file, creating parent directories

    Args:
        result: ReconciliationResult
        output_path: Path to output file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(format_report_json(result))
        f.write("\n")


def format_report_console(result: Any) -> str:
    """
    Format a result for terminal output

    Args:
        result: ReconciliationResult

    Returns:
        Multi-line report ending with the one-line summary
    """
    status = "IN SYNC" if result.in_sync else "OUT OF SYNC"
    limit = f" (last {result.partition_limit} partitions)" if result.partition_limit else ""

    lines = [
        "=" * 70,
        "SYNC VALIDATION REPORT",
        "=" * 70,
        f"Status:           {status}",
        f"Mode:             {result.mode.value}{limit}",
        f"Source:           {result.source_table} ({result.source_count:,} rows)",
        f"Target:           {result.target_table} ({result.target_count:,} rows)",
        f"Behind:           {result.behind_table} ({result.behind})",
        f"Pending commits:  {len(result.pending_commits)}",
    ]

    if result.pending_commits:
        lines.append(
            f"                  {result.pending_commits[0]} .. {result.pending_commits[-1]}"
        )

    lines.extend([
        "-" * 70,
        result.summary(),
        "=" * 70,
    ])

    return "\n".join(lines)
