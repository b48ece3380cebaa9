"""
hdf2asff - HDF to AWS Security Finding Format converter

A CLI tool that converts Heimdall Data Format (HDF/InSpec) evaluation results
into AWS Security Finding Format (ASFF) findings and delivers them to AWS
Security Hub or to local JSON files.

Key features:
- Deterministic finding identities for idempotent re-import
- Overlay-aware rendering of controls declared by several profiles
- ASFF field budgets with markers pointing at the full text
- Chunked Security Hub upload with per-chunk failure accounting

Architecture:
    Input (HDF JSON) → Reader → Evaluation → Mappers → ASFF findings → Files / Security Hub
"""

__version__ = "1.0.0"
__author__ = "hdf2asff contributors"
__license__ = "Apache-2.0"

from .cli import cli

__all__ = ['cli']
