"""
Comparison session.

Holds up to three dataset slots. The first active dataset is the
comparison baseline. Every query recomputes from the current slots, so
an upload, replace or reset is immediately reflected and derived rows can
never go stale.
"""

import logging
from typing import Optional

from sarif_compare.comparison import compare_datasets
from sarif_compare.exceptions import DatasetLimitError
from sarif_compare.models import ComparisonResult, Dataset, RuleSummaryRow
from sarif_compare.summary import summarize_rules

__all__ = ["MAX_DATASETS", "ComparisonSession"]

logger = logging.getLogger(__name__)

MAX_DATASETS = 3


class ComparisonSession:
    """Three-slot holder of the datasets being compared"""

    def __init__(self, max_datasets: int = MAX_DATASETS):
        self.max_datasets = max_datasets
        self._slots: list[Optional[Dataset]] = [None] * max_datasets

    @property
    def active_datasets(self) -> list[Dataset]:
        """Occupied slots, in slot order"""
        return [dataset for dataset in self._slots if dataset is not None]

    @property
    def next_upload_index(self) -> Optional[int]:
        """First free slot, or None when the session is full"""
        for index, dataset in enumerate(self._slots):
            if dataset is None:
                return index
        return None

    def upload(self, dataset: Dataset, index: Optional[int] = None) -> int:
        """Store ``dataset`` in a slot and return the slot index.

        Args:
            dataset: Dataset to add
            index: Slot to fill or replace; the next free slot when omitted

        Raises:
            DatasetLimitError: If ``index`` is out of range, or no slot is free
        """
        if index is None:
            index = self.next_upload_index
            if index is None:
                raise DatasetLimitError(
                    f"Comparison session is full ({self.max_datasets} datasets); reset or replace a slot"
                )
        elif not 0 <= index < self.max_datasets:
            raise DatasetLimitError(f"Slot {index} out of range (0-{self.max_datasets - 1})")

        if self._slots[index] is not None:
            logger.info("Replacing dataset in slot %d (%s -> %s)", index, self._slots[index].name, dataset.name)
        else:
            logger.info("Uploaded %s into slot %d", dataset.name, index)
        self._slots[index] = dataset
        return index

    def reset(self) -> None:
        """Start a new comparison: clear every slot"""
        self._slots = [None] * self.max_datasets
        logger.info("Comparison session reset")

    def result(self) -> ComparisonResult:
        return compare_datasets(self.active_datasets)

    def summaries(self) -> list[list[RuleSummaryRow]]:
        return [summarize_rules(dataset) for dataset in self.active_datasets]

    def snapshot(self) -> tuple[ComparisonResult, list[list[RuleSummaryRow]]]:
        """Comparison result and per-rule summaries from the same datasets"""
        datasets = self.active_datasets
        return compare_datasets(datasets), [summarize_rules(dataset) for dataset in datasets]
