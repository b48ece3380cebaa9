"""
File sink for converted findings

Writes findings as numbered JSON files, ``<output>.p<index>.json``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..config import FILE_CHUNK_SIZE
from .chunking import ChunkOutcome, DeliveryReport, chunk

logger = logging.getLogger(__name__)


class FindingFileWriter:
    """Writer for chunked ASFF JSON output files"""
    
    def __init__(self, output_path: Path, chunk_size: int = FILE_CHUNK_SIZE):
        self.output_path = Path(output_path)
        self.chunk_size = chunk_size
    
    def path_for(self, index: int) -> Path:
        return self.output_path.with_name(f"{self.output_path.name}.p{index}.json")
    
    def write(self, findings: Sequence[Dict[str, Any]]) -> DeliveryReport:
        """Write every chunk to its own file"""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        report = DeliveryReport()
        
        for index, batch in enumerate(chunk(findings, self.chunk_size)):
            report.chunks.append(self._write_chunk(index, batch))
        
        logger.info(f"Wrote {len(findings)} findings to {len(report.chunks)} files")
        return report
    
    def _write_chunk(self, index: int, batch: List[Dict[str, Any]]) -> ChunkOutcome:
        path = self.path_for(index)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(batch, f, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            return ChunkOutcome(index=index, submitted=len(batch), failed=len(batch), error=str(e))
        
        logger.debug(f"Generated: {path}")
        return ChunkOutcome(index=index, submitted=len(batch), succeeded=len(batch))
