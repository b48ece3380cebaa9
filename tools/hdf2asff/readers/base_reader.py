"""
Base reader class for hdf2asff

Provides common functionality for input document readers.
"""

import hashlib
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class BaseReader(ABC):
    """Base class for all document readers"""
    
    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise FileNotFoundError(f"Input file not found: {file_path}")
        
        self.file_hash = self._calculate_file_hash()
        self.extraction_date = datetime.now(timezone.utc).isoformat(timespec="seconds")
    
    def _calculate_file_hash(self) -> str:
        """Calculate SHA-256 hash of input file"""
        hasher = hashlib.sha256()
        with open(self.file_path, 'rb') as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hasher.update(chunk)
        return hasher.hexdigest()
    
    @abstractmethod
    def read(self) -> Any:
        """Parse the raw input document"""
        pass
