"""
Cohort resolution from file labels.

A file label names a cohort when it contains both years of one known
start/end pair ("...2023...2027..." → batch ``2023-2027``, ``Year 3``).
The position of the pair in ``COHORTS`` fixes the file processing order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from core.roster.aliases import COHORTS
from core.roster.config import UNKNOWN_BATCH, UNKNOWN_COHORT


@dataclass(frozen=True)
class BatchInfo:
    batch: str
    cohort: str
    rank: int

    @property
    def known(self) -> bool:
        return self.batch != UNKNOWN_BATCH

    @property
    def separator_label(self) -> str:
        if not self.known:
            return f"{self.batch} ({self.cohort})"
        return f"{self.batch} Batch ({self.cohort})"


def resolve_batch(
    label: Optional[str],
    cohorts: Sequence[Tuple[str, str, str]] = COHORTS,
) -> BatchInfo:
    """
    Return the cohort named by *label*; ``Unknown Batch`` when no known
    year pair is fully present. Unknown cohorts rank after every known one.
    """
    text = label or ""
    for rank, (start, end, cohort) in enumerate(cohorts):
        if start in text and end in text:
            return BatchInfo(batch=f"{start}-{end}", cohort=cohort, rank=rank)
    return BatchInfo(batch=UNKNOWN_BATCH, cohort=UNKNOWN_COHORT, rank=len(cohorts))
