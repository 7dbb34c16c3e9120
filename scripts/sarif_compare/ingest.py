"""
SARIF ingestion.

Reads a SARIF document, validates the consumed subset with the models in
``schemas.py`` and converts one run into a :class:`Dataset`. Every failure
is reported as :class:`SarifLoadError` before data reaches the comparison
core.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from sarif_compare.exceptions import SarifLoadError
from sarif_compare.models import Dataset, Finding, Location, Rule
from sarif_compare.schemas import SarifLocation, SarifLog, SarifRun

__all__ = ["parse_sarif", "load_sarif_text", "load_sarif", "run_to_dataset"]

logger = logging.getLogger(__name__)

SUPPORTED_VERSION_PREFIX = "2.1"


def _to_location(location: SarifLocation) -> Location:
    physical = location.physical_location
    if physical is None:
        return Location()

    uri = physical.artifact_location.uri if physical.artifact_location else ""
    region = physical.region
    if region is None:
        return Location(uri=uri)
    return Location(
        uri=uri,
        start_line=region.start_line,
        start_column=region.start_column,
        end_line=region.end_line,
        end_column=region.end_column,
    )


def run_to_dataset(run: SarifRun, source: Optional[str] = None) -> Dataset:
    """Convert a validated SARIF run into a Dataset.

    When the driver lists the same rule id more than once the first entry
    wins, so rule lookups behave like a first-match search of the list.
    """
    rules: dict[str, Rule] = {}
    for descriptor in run.tool.driver.rules:
        if descriptor.id in rules:
            logger.debug("Duplicate rule id %r in %s; keeping first definition", descriptor.id, source)
            continue
        rules[descriptor.id] = Rule(
            id=descriptor.id,
            name=descriptor.name,
            short_description=descriptor.short_description.text if descriptor.short_description else None,
            level=descriptor.default_configuration.level if descriptor.default_configuration else None,
            tags=tuple(descriptor.properties.tags) if descriptor.properties else (),
        )

    findings = [
        Finding(
            rule_id=result.rule_id,
            message=result.message.text,
            locations=tuple(_to_location(loc) for loc in result.locations),
            level=result.level,
        )
        for result in run.results
    ]

    return Dataset(
        name=run.tool.driver.name or "Unknown",
        findings=findings,
        rules=rules,
        source=source,
    )


def parse_sarif(document: Any, run_index: int = 0, source: Optional[str] = None) -> Dataset:
    """Validate an already-decoded SARIF document and extract one run.

    Args:
        document: Decoded JSON (normally a dict)
        run_index: Which run to compare; the first run by default
        source: Where the document came from, used in messages

    Returns:
        Dataset built from the selected run

    Raises:
        SarifLoadError: If the document does not match the expected structure
    """
    label = source or "<document>"
    if not isinstance(document, dict):
        raise SarifLoadError(f"{label}: SARIF document must be a JSON object")

    try:
        log = SarifLog.model_validate(document)
    except ValidationError as exc:
        raise SarifLoadError(f"{label}: invalid SARIF structure: {exc}") from exc

    if not log.version.startswith(SUPPORTED_VERSION_PREFIX):
        logger.warning("%s uses SARIF version %r, expected %s.x", label, log.version, SUPPORTED_VERSION_PREFIX)

    if run_index < 0 or run_index >= len(log.runs):
        raise SarifLoadError(f"{label}: run index {run_index} out of range ({len(log.runs)} run(s) in document)")

    dataset = run_to_dataset(log.runs[run_index], source=source)
    logger.info(
        "Loaded %s: tool=%s, %d findings, %d rules",
        label,
        dataset.name,
        dataset.total_findings,
        len(dataset.rules),
    )
    return dataset


def load_sarif_text(text: str, run_index: int = 0, source: Optional[str] = None) -> Dataset:
    """Parse SARIF JSON text."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SarifLoadError(
            f"{source or '<document>'}: error parsing SARIF file, not valid JSON ({exc})"
        ) from exc
    return parse_sarif(document, run_index=run_index, source=source)


def load_sarif(path: Union[str, Path], run_index: int = 0) -> Dataset:
    """Read and parse a SARIF file from disk."""
    sarif_path = Path(path)
    try:
        text = sarif_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SarifLoadError(f"{sarif_path}: cannot read file ({exc})") from exc
    return load_sarif_text(text, run_index=run_index, source=str(sarif_path))
