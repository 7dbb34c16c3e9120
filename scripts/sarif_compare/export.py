"""
Export adapters.

Turns a ComparisonResult and per-rule summaries into tabular rows, and
writes those rows as ``.xlsx`` workbooks (openpyxl) or JSON-ready dicts.

Functions:
    comparison_headers: Column headers of the comparison sheet
    comparison_rows: Rows of the comparison sheet (title, header, data, average)
    summary_rows: Rows of the per-rule summary sheet, with a TOTAL line
    write_workbook: Write rows to a single-sheet workbook
    export_comparison_xlsx: Comparison sheet to ``sarif-comparison.xlsx``
    export_summary_xlsx: Summary sheet to ``sarif-summary.xlsx``
    comparison_to_dict: JSON-serializable view of a ComparisonResult
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence, Union

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from sarif_compare.models import ComparisonResult, RuleSummaryRow
from sarif_compare.summary import total_findings

logger = logging.getLogger(__name__)

COMPARISON_SHEET = "Comparison Summary"
SUMMARY_SHEET = "Summary"
DEFAULT_COMPARISON_FILE = "sarif-comparison.xlsx"
DEFAULT_SUMMARY_FILE = "sarif-summary.xlsx"
COLUMN_WIDTH = 15

SUMMARY_COLUMNS = ["Rule ID", "CWE", "Tags", "Count", "Severity"]


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def comparison_headers(names: Sequence[str]) -> list[str]:
    """``CWE``, one findings column per dataset, then delta and overlap columns"""
    finding_headers = [f"{name} Findings" for name in names]
    delta_headers = [f"Delta {names[i]} - {name}" for i, name in enumerate(names[1:])]
    overlap_headers = [f"Overlap {names[0]} - {name} %" for name in names[1:]]
    return ["CWE", *finding_headers, *delta_headers, *overlap_headers]


def comparison_rows(result: ComparisonResult) -> list[list[Any]]:
    """Tabular rows of the comparison sheet.

    Layout: title row, blank row, header row, one row per category, blank
    row, then the ``Average`` row carrying only the averaged overlaps.
    """
    names = list(result.names)
    pairings = max(len(names) - 1, 0)

    rows: list[list[Any]] = [
        [" vs ".join(names)],
        [],
        comparison_headers(names),
    ]
    for row in result.rows:
        rows.append(
            [
                row.category,
                *row.findings,
                *row.deltas,
                *(format_percentage(overlap) for overlap in row.overlaps),
            ]
        )
    rows.append([])
    rows.append(
        [
            "Average",
            *([""] * len(names)),
            *([""] * pairings),
            *(format_percentage(avg) for avg in result.average_overlaps),
        ]
    )
    return rows


def summary_rows(rows: Sequence[RuleSummaryRow]) -> list[dict[str, Any]]:
    """Per-rule summary rows followed by a ``TOTAL`` row"""
    data = [
        dict(
            zip(
                SUMMARY_COLUMNS,
                [
                    row.rule_id if row.rule_id is not None else "",
                    row.category,
                    ", ".join(row.tags),
                    row.count,
                    row.severity,
                ],
            )
        )
        for row in rows
    ]
    data.append(dict(zip(SUMMARY_COLUMNS, ["TOTAL", "", "", total_findings(rows), ""])))
    return data


def write_workbook(
    rows: Sequence[Union[Sequence[Any], dict[str, Any]]],
    path: Union[str, Path],
    sheet_name: str,
    merge_title: bool = False,
) -> Path:
    """Write rows to a single-sheet workbook.

    Dict rows are written with their keys as a header line. With
    ``merge_title`` the first row is merged across every column.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    if rows and isinstance(rows[0], dict):
        header = list(rows[0].keys())
        table: list[Sequence[Any]] = [header, *([row.get(key, "") for key in header] for row in rows)]
    else:
        table = list(rows)

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for row in table:
        ws.append(list(row))

    width = max((len(row) for row in table), default=1)
    for col in range(1, width + 1):
        ws.column_dimensions[get_column_letter(col)].width = COLUMN_WIDTH
    if merge_title and width > 1:
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)

    wb.save(out_path)
    logger.info("Wrote %s sheet to %s", sheet_name, out_path)
    return out_path


def export_comparison_xlsx(result: ComparisonResult, path: Union[str, Path]) -> Path:
    return write_workbook(comparison_rows(result), path, COMPARISON_SHEET, merge_title=True)


def export_summary_xlsx(rows: Sequence[RuleSummaryRow], path: Union[str, Path]) -> Path:
    return write_workbook(summary_rows(rows), path, SUMMARY_SHEET)


def comparison_to_dict(result: ComparisonResult) -> dict[str, Any]:
    """JSON-serializable view of a comparison"""
    return {
        "datasets": list(result.names),
        "rows": [asdict(row) for row in result.rows],
        "average_overlaps": list(result.average_overlaps),
    }


__all__ = [
    "COMPARISON_SHEET",
    "SUMMARY_SHEET",
    "DEFAULT_COMPARISON_FILE",
    "DEFAULT_SUMMARY_FILE",
    "SUMMARY_COLUMNS",
    "format_percentage",
    "comparison_headers",
    "comparison_rows",
    "summary_rows",
    "write_workbook",
    "export_comparison_xlsx",
    "export_summary_xlsx",
    "comparison_to_dict",
]
