"""CLI entry point for SARIF Compare.

Loads one to three SARIF files, prints the CWE comparison and the per-rule
summary of each file to the console, and writes the enabled export formats
(xlsx, JSON, Markdown).
"""

import argparse
import logging
import sys
from typing import Optional

from sarif_compare.config import build_unified_config, validate_config
from sarif_compare.exceptions import SarifCompareError
from sarif_compare.ingest import load_sarif
from sarif_compare.report import print_rule_summary, print_summary, save_results
from sarif_compare.session import MAX_DATASETS, ComparisonSession

logger = logging.getLogger(__name__)


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="YAML config file (default: .sarif-compare.yml if present)")
    parser.add_argument("--output-dir", help="Output directory for exported files (default: sarif-compare-results)")
    parser.add_argument("--format", help="Comma-separated export formats: xlsx,json,md (default: xlsx)")
    parser.add_argument("--comparison-file", help="Workbook name for the comparison sheet")
    parser.add_argument("--summary-file", help="Workbook name for the per-rule summary")
    parser.add_argument("--run-index", type=int, help="Which run of each SARIF log to use (default: 0)")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--quiet", action="store_true", default=False, help="Only log warnings and errors")


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")
    logging.getLogger().setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sarif-compare",
        description="SARIF Compare - Compare static-analysis findings across up to three SARIF files by CWE",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser("compare", help="Compare 1-3 SARIF files by CWE")
    compare_parser.add_argument("files", nargs="+", help="SARIF files; the first one is the baseline")
    _add_common_options(compare_parser)

    summary_parser = subparsers.add_parser("summary", help="Per-rule summary of one SARIF file")
    summary_parser.add_argument("file", help="SARIF file to summarize")
    _add_common_options(summary_parser)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for SARIF Compare"""
    parser = build_parser()
    args = parser.parse_args(argv)

    files = args.files if args.command == "compare" else [args.file]
    if len(files) > MAX_DATASETS:
        parser.error(f"at most {MAX_DATASETS} SARIF files can be compared, got {len(files)}")

    # Provisional level from the command line so config loading is logged too
    _configure_logging(args.log_level or ("WARNING" if args.quiet else "INFO"))

    try:
        config = build_unified_config(cli_args=args)
    except SarifCompareError as exc:
        logger.error("%s", exc)
        return 2

    _configure_logging(config["log_level"])

    issues = validate_config(config)
    for issue in issues:
        logger.warning(issue)
    if any(issue.startswith("ERROR") for issue in issues):
        return 2

    session = ComparisonSession()
    try:
        for path in files:
            session.upload(load_sarif(path, run_index=config["run_index"]))
    except SarifCompareError as exc:
        logger.error("%s", exc)
        return 2

    result, summaries = session.snapshot()
    if args.command == "compare":
        print_summary(result)
    for name, rows in zip(result.names, summaries):
        print_rule_summary(name, rows)

    written = save_results(
        result,
        summaries,
        config["output_dir"],
        formats=config["export_formats"],
        comparison_filename=config["comparison_filename"],
        summary_filename=config["summary_filename"],
    )
    for path in written:
        print(f"Wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
