"""
HDF evaluation model for hdf2asff

Typed view of the source document plus the overlay resolver and status
aggregator that operate on it.
"""

from .models import (
    Attribute,
    Control,
    Description,
    Evaluation,
    ListTag,
    Platform,
    Profile,
    Result,
    ScalarTag,
    UnknownTag,
    tag_from_value,
)
from .overlays import ControlLayer, resolve_canonical_controls, resolve_layers
from .statistics import Counts, count, create_description
from .validator import HDFValidator

__all__ = [
    'Attribute',
    'Control',
    'ControlLayer',
    'Counts',
    'Description',
    'Evaluation',
    'HDFValidator',
    'ListTag',
    'Platform',
    'Profile',
    'Result',
    'ScalarTag',
    'UnknownTag',
    'count',
    'create_description',
    'resolve_canonical_controls',
    'resolve_layers',
    'tag_from_value'
]
