"""
SARIF Comparison Report Generation.

Functions:
    format_delta: Render a delta with an explicit sign
    save_results: Save comparison results in every enabled format (xlsx, JSON, Markdown)
    generate_markdown_report: Generate human-readable Markdown report
    format_finding: One-line rendering of a finding and its locations
    print_summary: Print comparison summary to console
    print_rule_summary: Print the per-rule summary of one dataset
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from sarif_compare.export import (
    DEFAULT_COMPARISON_FILE,
    DEFAULT_SUMMARY_FILE,
    comparison_headers,
    comparison_to_dict,
    export_comparison_xlsx,
    export_summary_xlsx,
    format_percentage,
    summary_rows,
)
from sarif_compare.models import ComparisonResult, Finding, RuleSummaryRow
from sarif_compare.summary import total_findings

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("xlsx", "json", "md")


def format_delta(delta: int) -> str:
    """``+3``, ``-3`` or ``0``"""
    return f"+{delta}" if delta > 0 else str(delta)


def save_results(
    result: ComparisonResult,
    summaries: Sequence[Sequence[RuleSummaryRow]],
    output_dir: str,
    formats: Sequence[str] = SUPPORTED_FORMATS,
    comparison_filename: str = DEFAULT_COMPARISON_FILE,
    summary_filename: str = DEFAULT_SUMMARY_FILE,
) -> list[Path]:
    """Save results in the requested formats.

    Args:
        result: Comparison result to save
        summaries: Per-rule summary per dataset, same order as ``result.names``
        output_dir: Directory to save results to
        formats: Any of ``xlsx``, ``json``, ``md``
        comparison_filename: Workbook name for the comparison sheet
        summary_filename: Workbook name for the per-rule summary (suffixed per dataset
            when more than one dataset is summarized)

    Returns:
        Paths of every file written
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    if "xlsx" in formats:
        if len(result.names) > 1:
            written.append(export_comparison_xlsx(result, output_path / comparison_filename))
        for index, rows in enumerate(summaries):
            name = summary_filename
            if len(summaries) > 1:
                stem = Path(summary_filename).stem
                name = f"{stem}-{index + 1}.xlsx"
            written.append(export_summary_xlsx(rows, output_path / name))

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")

    if "json" in formats:
        json_file = output_path / f"sarif-comparison-{timestamp}.json"
        payload = comparison_to_dict(result)
        payload["summaries"] = [summary_rows(rows) for rows in summaries]
        with open(json_file, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.info("JSON results: %s", json_file)
        written.append(json_file)

    if "md" in formats:
        md_file = output_path / f"sarif-comparison-{timestamp}.md"
        with open(md_file, "w", encoding="utf-8") as f:
            f.write(generate_markdown_report(result, summaries))
        logger.info("Markdown report: %s", md_file)
        written.append(md_file)

    return written


def _escape_cell(cell: object) -> str:
    return str(cell).replace("|", "\\|")


def _markdown_table(header: Sequence[str], rows: Sequence[Sequence[object]]) -> list[str]:
    lines = ["| " + " | ".join(_escape_cell(cell) for cell in header) + " |\n"]
    lines.append("|" + "---|" * len(header) + "\n")
    for row in rows:
        lines.append("| " + " | ".join(_escape_cell(cell) for cell in row) + " |\n")
    return lines


def format_finding(finding: Finding) -> str:
    """``message (uri:line, ...)``; the message alone when there is no location"""
    where = ", ".join(location.display() for location in finding.locations if location.uri)
    message = finding.message or "(no message)"
    return f"{message} ({where})" if where else message


def _markdown_details(rows: Sequence[RuleSummaryRow]) -> list[str]:
    lines = []
    for row in rows:
        if not row.findings:
            continue
        heading = f"`{row.rule_id}`" if row.rule_id else "(no rule id)"
        if row.description:
            heading += f": {row.description}"
        lines.append(f"#### {heading}\n\n")
        lines.extend(f"- {format_finding(finding)}\n" for finding in row.findings)
        lines.append("\n")
    return lines


def generate_markdown_report(
    result: ComparisonResult,
    summaries: Optional[Sequence[Sequence[RuleSummaryRow]]] = None,
) -> str:
    """Generate human-readable Markdown report.

    Args:
        result: The comparison result to format
        summaries: Optional per-rule summaries, one list per dataset

    Returns:
        Markdown-formatted report string
    """
    report = []

    report.append("# SARIF Comparison Report\n\n")
    report.append(f"**Generated**: {datetime.now().isoformat(timespec='seconds')}\n\n")
    for index, name in enumerate(result.names, 1):
        report.append(f"- **Tool {index}**: {name}\n")
    report.append("\n---\n\n")

    if len(result.names) > 1:
        report.append("## Comparison Summary\n\n")
        table_rows = [
            [
                row.category,
                *row.findings,
                *(format_delta(delta) for delta in row.deltas),
                *(format_percentage(overlap) for overlap in row.overlaps),
            ]
            for row in result.rows
        ]
        table_rows.append(
            [
                "**Average**",
                *([""] * (len(result.names) * 2 - 1)),
                *(format_percentage(avg) for avg in result.average_overlaps),
            ]
        )
        report.extend(_markdown_table(comparison_headers(result.names), table_rows))
        report.append("\n")

        report.append("## Findings by CWE\n\n")
        for row in result.rows:
            report.append(f"### {row.category}\n\n")
            for index, name in enumerate(result.names):
                contributors = row.contributors[index] if index < len(row.contributors) else ()
                if not contributors:
                    report.append(f"- **{name}**: No findings for this CWE\n")
                    continue
                rules = ", ".join(
                    f"`{rule_id}` ({count} {'finding' if count == 1 else 'findings'})"
                    for rule_id, count in contributors
                )
                report.append(f"- **{name}**: {rules}\n")
            report.append("\n")

    for name, rows in zip(result.names, summaries or []):
        report.append(f"## Rules: {name}\n\n")
        data = summary_rows(rows)
        report.extend(_markdown_table(list(data[0].keys()), [list(item.values()) for item in data]))
        report.append("\n")
        details = _markdown_details(rows)
        if details:
            report.append(f"### Findings: {name}\n\n")
            report.extend(details)

    return "".join(report)


def print_summary(result: ComparisonResult) -> None:
    """Print comparison summary to console.

    Args:
        result: The comparison result to summarize
    """
    print("\n" + "=" * 80)
    print("SARIF COMPARISON - RESULTS")
    print("=" * 80)
    for index, name in enumerate(result.names, 1):
        print(f"Tool {index}: {name}")
    print()

    if not result.rows:
        print("No CWE-tagged findings in any dataset.")
        print("=" * 80)
        return

    for row in result.rows:
        parts = []
        for index, count in enumerate(row.findings):
            parts.append(f"{result.names[index]}: {count} findings")
            if index < len(row.deltas):
                parts.append(f"Δ {format_delta(row.deltas[index])}")
        overlaps = ", ".join(format_percentage(overlap) for overlap in row.overlaps)
        line = f"   {row.category:<10} " + " | ".join(parts)
        if overlaps:
            line += f" | overlap {overlaps}"
        print(line)

    if result.average_overlaps:
        print()
        print("Average overlap:")
        for name, avg in zip(result.names[1:], result.average_overlaps):
            print(f"   {result.names[0]} - {name}: {format_percentage(avg)}")
    print("=" * 80)


def print_rule_summary(name: str, rows: Sequence[RuleSummaryRow]) -> None:
    """Print the per-rule summary of one dataset, most severe rule first.

    Args:
        name: Tool name of the dataset
        rows: Output of :func:`summarize_rules`
    """
    print("\n" + "-" * 80)
    print(f"RULES - {name}")
    print("-" * 80)
    if not rows:
        print("No findings.")
    for row in rows:
        rule_id = row.rule_id or "(no rule id)"
        category = row.category or "-"
        tags = ", ".join(row.tags)
        print(f"   [{row.severity:<7}] {rule_id} | {category} | {row.count} findings" + (f" | {tags}" if tags else ""))
    print(f"   TOTAL: {total_findings(rows)} findings")


__all__ = [
    "SUPPORTED_FORMATS",
    "format_delta",
    "format_finding",
    "save_results",
    "generate_markdown_report",
    "print_summary",
    "print_rule_summary",
]
