"""
ASFF mappers for hdf2asff

Mappers convert the HDF evaluation model to AWS Security Finding Format records.
"""

from .base_mapper import BaseMapper, FindingClock
from .finding_mapper import FindingMapper
from .summary_mapper import SummaryMapper

__all__ = [
    'BaseMapper',
    'FindingClock',
    'FindingMapper',
    'SummaryMapper'
]
