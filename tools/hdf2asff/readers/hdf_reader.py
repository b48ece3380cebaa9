"""
HDF reader for JSON files

Reads an HDF/InSpec execution JSON document, checks its structure and builds
the typed evaluation model.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..hdf.models import Evaluation
from ..hdf.validator import HDFValidator, format_violation
from .base_reader import BaseReader

logger = logging.getLogger(__name__)


class HDFReader(BaseReader):
    """Reader for HDF execution JSON files"""
    
    def __init__(self, file_path: Path, validator: Optional[HDFValidator] = None):
        super().__init__(file_path)
        self.validator = validator or HDFValidator()
    
    def read(self) -> Dict[str, Any]:
        """Load the JSON document as plain data"""
        logger.info(f"Reading HDF file: {self.file_path}")
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Input is not valid JSON: {self.file_path}: {e}") from e
    
    def to_evaluation(self) -> Evaluation:
        """Convert the input file to an Evaluation"""
        data = self.read()
        
        report = self.validator.get_validation_report(data)
        for warning in report["warnings"]:
            logger.warning(f"  {format_violation(warning)}")

        errors = [format_violation(error) for error in report["errors"]]
        if errors:
            for error in errors:
                logger.error(f"  {error}")
            raise ValueError(
                f"{self.file_path} is not a usable HDF document ({len(errors)} schema violations)"
            )
        
        evaluation = Evaluation.from_dict(data)
        logger.debug(
            f"Loaded {len(evaluation.profiles)} profiles "
            f"(sha256 {self.file_hash[:12]}) from {self.file_path.name} at {self.extraction_date}"
        )
        return evaluation
