"""
Base mapper class for ASFF conversions

Provides common functionality for all HDF to ASFF mappers.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..config import ASFF_SCHEMA_VERSION, ConversionContext
from ..hdf.models import Evaluation

logger = logging.getLogger(__name__)


def isoformat(moment: datetime) -> str:
    """UTC ISO-8601 timestamp with millisecond precision and a Z suffix"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> str:
    return isoformat(datetime.now(timezone.utc))


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, or None when absent or unparsable"""
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Ignoring unparsable timestamp: {value!r}")
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class FindingClock:
    """Strictly increasing UpdatedAt values for one run

    Each call advances a logical counter by one millisecond from `start`, so
    sorting by UpdatedAt recovers emission order. `ending_now` backdates the
    start so that no value lies in the future.
    """

    def __init__(self, start: Optional[datetime] = None):
        self.start = start or datetime.now(timezone.utc)
        self._ticks = itertools.count()

    @classmethod
    def ending_now(cls, ticks: int) -> "FindingClock":
        """Clock whose last of `ticks` values is the current time"""
        return cls(datetime.now(timezone.utc) - timedelta(milliseconds=max(ticks - 1, 0)))

    def next(self) -> str:
        return isoformat(self.start + timedelta(milliseconds=next(self._ticks)))


class BaseMapper(ABC):
    """Base class for all HDF to ASFF mappers"""

    def __init__(self, context: ConversionContext, clock: Optional[FindingClock] = None):
        self.context = context
        self.clock = clock or FindingClock()

    def create_finding(self, finding_id: str, generator_id: str, created_at: str,
                       title: str, description: str) -> Dict[str, Any]:
        """Create the fields every ASFF finding carries"""
        return {
            "SchemaVersion": ASFF_SCHEMA_VERSION,
            "Id": finding_id,
            "ProductArn": self.context.product_arn,
            "GeneratorId": generator_id,
            "AwsAccountId": self.context.aws_account_id,
            "CreatedAt": created_at,
            "UpdatedAt": self.clock.next(),
            "Title": title,
            "Description": description,
        }

    def create_severity(self, label: str, original: Optional[str] = None) -> Dict[str, str]:
        """Create ASFF severity object"""
        severity = {"Label": label}
        if original is not None:
            severity["Original"] = original
        return severity

    def create_resources(self, *extra: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Account resource followed by any finding-specific resources"""
        return [self.context.account_resource(), *extra]

    @abstractmethod
    def map(self, evaluation: Evaluation, *args, **kwargs) -> Any:
        """Map an evaluation to ASFF"""
        pass
