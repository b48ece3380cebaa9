"""
Delivery sinks for hdf2asff

Chunked output of findings to local JSON files or to AWS Security Hub.
"""

from .chunking import ChunkOutcome, DeliveryReport, chunk
from .dispatcher import BatchDispatcher
from .file_writer import FindingFileWriter
from .securityhub import SecurityHubUploader

__all__ = [
    'BatchDispatcher',
    'ChunkOutcome',
    'DeliveryReport',
    'FindingFileWriter',
    'SecurityHubUploader',
    'chunk'
]
