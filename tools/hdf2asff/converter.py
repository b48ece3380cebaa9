"""
HDF to ASFF conversion

Runs the mappers over one evaluation and returns everything the sinks need.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .config import ConversionContext
from .hdf.models import Evaluation
from .hdf.statistics import Counts, count
from .mappers import FindingClock, FindingMapper, SummaryMapper

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    findings: List[Dict[str, Any]]
    summary: Dict[str, Any]
    counts: Counts


def convert(evaluation: Evaluation, context: ConversionContext,
            clock: Optional[FindingClock] = None) -> ConversionResult:
    """Convert an evaluation into per-segment findings plus a summary finding"""
    if clock is None:
        # One tick per segment plus the summary; the last one lands on now
        segments = sum(len(c.results) for p in evaluation.profiles for c in p.controls)
        clock = FindingClock.ending_now(segments + 1)
    counts = count(evaluation)
    findings = FindingMapper(context, clock).map(evaluation)
    summary = SummaryMapper(context, clock).map(evaluation, counts)
    logger.debug(f"Counts for {context.target}: {counts.as_dict()}")
    return ConversionResult(findings=findings, summary=summary, counts=counts)
