"""Reporting functionality for S-AES traces.

Generates CSV, JSON, and Markdown reports from a trace, and the table
shown by the CLI.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any

from tabulate import tabulate

from .interfaces import TraceStep
from .utils import byte_to_hex

CSV_FIELDS = ["index", "id", "description", "state_hex", "key_hex", "details"]


def _rows(trace: list[TraceStep]) -> list[dict[str, Any]]:
    return [{"index": i, **step.to_dict()} for i, step in enumerate(trace)]


def export_to_csv(trace: list[TraceStep], output_path: str | Path) -> Path:
    """Export a trace to CSV, one row per step.

    Args:
        trace: Steps from generate_trace
        output_path: Path to output CSV file

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for row in _rows(trace):
            # keep multi-line details on one CSV line
            row["details"] = row["details"].replace("\n", " ")
            writer.writerow(row)

    return output_path


def format_json(trace: list[TraceStep], indent: int = 2) -> str:
    """Render a trace as a JSON array of step dictionaries."""
    return json.dumps(_rows(trace), indent=indent)


def export_to_json(
    trace: list[TraceStep],
    output_path: str | Path,
    indent: int = 2,
) -> Path:
    """Export a trace to a JSON array of step dictionaries.

    Args:
        trace: Steps from generate_trace
        output_path: Path to output JSON file
        indent: JSON indentation level

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        f.write(format_json(trace, indent))

    return output_path


def format_markdown(trace: list[TraceStep], title: str = "S-AES Trace") -> str:
    """Render a trace as a Markdown document."""
    lines = [f"# {title}", ""]
    lines.append(tabulate(
        [[i, s.id.value, s.state.hex, s.to_dict()["key_hex"] or ""]
         for i, s in enumerate(trace)],
        headers=["#", "Step", "State", "Round Key"],
        tablefmt="github",
    ))
    lines.append("")

    for i, step in enumerate(trace):
        lines.append(f"## {i}. {step.description}")
        lines.append("")
        lines.append("```")
        m = step.state.matrix
        lines.append(f"{m[0][0]:X} {m[0][1]:X}")
        lines.append(f"{m[1][0]:X} {m[1][1]:X}")
        lines.append("```")
        lines.append("")
        for detail in step.details.splitlines():
            lines.append(f"> {detail}  ")
        if step.expanded_words is not None:
            lines.append("")
            lines.append("Words: " + " ".join(
                f"w{j}={byte_to_hex(w)}" for j, w in enumerate(step.expanded_words)
            ))
        lines.append("")

    return "\n".join(lines)


def export_to_markdown(
    trace: list[TraceStep],
    output_path: str | Path,
    title: str = "S-AES Trace",
) -> Path:
    """Export a trace as a Markdown report.

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        f.write(format_markdown(trace, title))

    return output_path


def format_trace_table(trace: list[TraceStep], compact: bool = False) -> str:
    """Format a trace as a table string for CLI output.

    Args:
        trace: Steps from generate_trace
        compact: Omit the description column

    Returns:
        Formatted table string
    """
    if not trace:
        return "No steps."

    if compact:
        headers = ["#", "Step", "State", "Key"]
        rows = [
            [i, s.id.value, s.state.hex, s.to_dict()["key_hex"] or ""]
            for i, s in enumerate(trace)
        ]
    else:
        headers = ["#", "Step", "Description", "State", "Matrix", "Round Key"]
        rows = [
            [
                i,
                s.id.value,
                s.description,
                s.state.hex,
                " / ".join(" ".join(f"{n:X}" for n in row) for row in s.state.matrix),
                s.to_dict()["key_hex"] or "",
            ]
            for i, s in enumerate(trace)
        ]

    return tabulate(rows, headers=headers, tablefmt="simple")
