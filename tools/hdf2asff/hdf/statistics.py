"""
Status aggregation over canonical controls
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict

from .models import FAILED, NOT_APPLICABLE, NOT_REVIEWED, PASSED, Evaluation
from .overlays import resolve_canonical_controls

logger = logging.getLogger(__name__)


@dataclass
class Counts:
    Passed: int = 0
    PassedTests: int = 0
    Failed: int = 0
    FailedTests: int = 0
    PassingTestsFailedControl: int = 0
    NotApplicable: int = 0
    NotReviewed: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def count(evaluation: Evaluation) -> Counts:
    """Count control outcomes, each logical control exactly once"""
    counts = Counts()
    for control in resolve_canonical_controls(evaluation):
        status = control.status
        if status == PASSED:
            counts.Passed += 1
            counts.PassedTests += len(control.results)
        elif status == FAILED:
            counts.Failed += 1
            counts.PassingTestsFailedControl += sum(1 for r in control.results if r.status == "passed")
            counts.FailedTests += sum(1 for r in control.results if r.status == "failed")
        elif status == NOT_APPLICABLE:
            counts.NotApplicable += 1
        elif status == NOT_REVIEWED:
            counts.NotReviewed += 1
        else:
            logger.debug(f"Control {control.id} has status {status!r}, not counted")
    return counts


def create_description(counts: Counts) -> str:
    """Human-readable rendering of the counts for the summary finding"""
    return (
        f"Passed: {counts.Passed} ({counts.PassedTests} individual checks passed) --- "
        f"Failed: {counts.Failed} ({counts.PassingTestsFailedControl} individual checks failed "
        f"out of {counts.PassingTestsFailedControl + counts.FailedTests} total checks) --- "
        f"Not Applicable: {counts.NotApplicable} (System exception or absent component) --- "
        f"Not Reviewed: {counts.NotReviewed} (Can only be tested manually at this time)"
    )
