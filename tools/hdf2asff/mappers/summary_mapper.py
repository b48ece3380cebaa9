"""
Summary mapper

Builds the single informational finding describing a whole run: aggregate
control counts plus the provenance of every profile that took part.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import SUMMARY_TYPES_LIMIT
from ..hdf.models import PROFILE_INFO_FIELDS, Evaluation, Profile
from ..hdf.statistics import Counts, count, create_description
from .base_mapper import BaseMapper, isoformat, parse_timestamp
from .text import replace_slashes

logger = logging.getLogger(__name__)


def get_run_time(evaluation: Evaluation) -> datetime:
    """Earliest segment start time in the evaluation, or now"""
    start_times = [
        moment
        for profile in evaluation.profiles
        for control in profile.controls
        for result in control.results
        for moment in [parse_timestamp(result.start_time)]
        if moment is not None
    ]
    return min(start_times) if start_times else datetime.now(timezone.utc)


def profile_types(profile: Profile) -> List[str]:
    """Provenance entries contributed by one profile"""
    types = [
        f"{profile.name}/{name}/{value}"
        for name, value in profile.provenance().items()
        if value
    ]
    inputs = [
        {attribute.name: attribute.value}
        for attribute in profile.attributes
        if attribute.value
    ]
    encoded = json.dumps(inputs, separators=(",", ":"), ensure_ascii=False, default=str)
    types.append(f"{profile.name}/inputs/{replace_slashes(encoded)}")
    return types


class SummaryMapper(BaseMapper):
    """Mapper for the per-run summary finding"""

    def map(self, evaluation: Evaluation, counts: Optional[Counts] = None) -> Dict[str, Any]:
        """Build the summary finding for an evaluation"""
        counts = counts if counts is not None else count(evaluation)
        primary = evaluation.primary_profile.name
        local_now = datetime.now().astimezone()

        finding = self.create_finding(
            finding_id=f"{self.context.target}/{primary}",
            generator_id=self.context.generator_id(primary),
            created_at=isoformat(get_run_time(evaluation)),
            title=f"{self.context.target} | {primary} | {local_now.strftime('%Y-%m-%d %I:%M:%S GMT%z')}",
            description=create_description(counts),
        )
        finding["Severity"] = self.create_severity("INFORMATIONAL")
        finding["FindingProviderFields"] = {
            "Severity": self.create_severity("INFORMATIONAL"),
            "Types": self._provider_types(evaluation),
        }
        finding["Resources"] = self.create_resources()
        return finding

    def _provider_types(self, evaluation: Evaluation) -> List[str]:
        types = []
        for profile in evaluation.profiles:
            types.extend(profile_types(profile))
        if len(types) > SUMMARY_TYPES_LIMIT:
            logger.debug(f"Dropping {len(types) - SUMMARY_TYPES_LIMIT} summary provenance entries")
        return types[:SUMMARY_TYPES_LIMIT]
