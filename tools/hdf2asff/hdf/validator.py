"""
HDF validator using JSON schemas

Checks that an input document has the structure the converter reads.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft7Validator

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"
HDF_SCHEMA = "hdf_exec.json"

# Violations of these keywords make the document unusable, but only when they
# concern the document or profile structure; a malformed control or result
# falls back to model defaults instead
BLOCKING_VALIDATORS = ("required", "type", "minItems")


class HDFValidator:
    """Validator for HDF documents using bundled JSON schemas"""

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = Path(schema_dir) if schema_dir else DEFAULT_SCHEMA_DIR
        self.schemas: Dict[str, Dict[str, Any]] = {}
        self._load_schemas()

    def _load_schemas(self) -> None:
        """Load all HDF schemas from schema directory"""
        if not self.schema_dir.exists():
            logger.warning(f"Schema directory not found: {self.schema_dir}")
            return

        for schema_file in self.schema_dir.glob("hdf_*.json"):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    schema = json.load(f)

                Draft7Validator.check_schema(schema)
                self.schemas[schema_file.name] = schema
                logger.debug(f"Loaded schema: {schema_file.name}")

            except (json.JSONDecodeError, jsonschema.SchemaError) as e:
                logger.error(f"Invalid schema {schema_file}: {e}")

    def validate(self, data: Any, schema_name: str = HDF_SCHEMA) -> bool:
        """Validate data against specified schema"""
        return self.get_validation_report(data, schema_name)["valid"]

    def errors(self, data: Any, schema_name: str = HDF_SCHEMA) -> List[str]:
        """Blocking violations rendered as 'path: message' strings"""
        report = self.get_validation_report(data, schema_name)
        return [format_violation(error) for error in report["errors"]]

    def get_validation_report(self, data: Any, schema_name: str = HDF_SCHEMA) -> Dict[str, Any]:
        """Get detailed validation report"""
        if schema_name not in self.schemas:
            return {
                "valid": False,
                "errors": [f"Schema not found: {schema_name}"],
                "warnings": [],
                "schema": schema_name
            }

        validator = Draft7Validator(self.schemas[schema_name])
        errors = []
        warnings = []

        for error in validator.iter_errors(data):
            error_info = {
                "message": error.message,
                "path": list(error.absolute_path),
                "schema_path": list(error.schema_path)
            }

            if _is_blocking(error.validator, list(error.absolute_path)):
                errors.append(error_info)
            else:
                warnings.append(error_info)

        if errors:
            logger.debug(f"{len(errors)} blocking violations against {schema_name}")

        return {
            "valid": len(errors) == 0,
            "errors": errors,
            "warnings": warnings,
            "schema": schema_name,
            "data_summary": self._summarize_data(data)
        }

    def _summarize_data(self, data: Any) -> Dict[str, Any]:
        """Create summary of data structure"""
        summary = {
            "type": type(data).__name__,
            "keys": sorted(data.keys()) if isinstance(data, dict) else None
        }

        if isinstance(data, dict) and isinstance(data.get("profiles"), list):
            profiles = [p for p in data["profiles"] if isinstance(p, dict)]
            summary["profile_count"] = len(data["profiles"])
            summary["control_count"] = sum(
                len(p.get("controls") or []) for p in profiles
                if isinstance(p.get("controls") or [], list)
            )

        return summary


def _is_blocking(keyword: str, path: List[Any]) -> bool:
    """True for structural violations above the control level"""
    if keyword not in BLOCKING_VALIDATORS:
        return False
    if len(path) <= 2:
        return True
    return len(path) == 3 and path[0] == "profiles" and path[2] == "controls"


def _format_path(path: List[Any]) -> str:
    return " -> ".join(str(p) for p in path) or "<root>"


def format_violation(violation: Any) -> str:
    """Render a report entry as 'path: message'"""
    if isinstance(violation, str):
        return violation
    return f"{_format_path(violation['path'])}: {violation['message']}"
