"""
Document readers for hdf2asff

Readers turn input files into the typed HDF evaluation model.
"""

from .base_reader import BaseReader
from .hdf_reader import HDFReader

__all__ = [
    'BaseReader',
    'HDFReader'
]
