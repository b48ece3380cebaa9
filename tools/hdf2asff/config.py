"""
Run configuration for hdf2asff

Holds the immutable values shared by every builder during one conversion run:
target label, AWS account context, input filename and the ASFF field budgets.
"""

from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from typing import Dict, Optional

ASFF_SCHEMA_VERSION = "2018-10-08"

# Exact-match lookup; impacts between breakpoints fall back to DEFAULT_SEVERITY
SEVERITY_BY_IMPACT: Dict[float, str] = {
    0.9: "CRITICAL",
    0.7: "HIGH",
    0.5: "MEDIUM",
    0.3: "LOW",
    0.0: "INFORMATIONAL",
}
DEFAULT_SEVERITY = "INFORMATIONAL"

# ASFF field budgets
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 1024
REMEDIATION_LIMIT = 512
CHECK_LIMIT = 2048
STATUS_REASON_LIMIT = 2048
SUMMARY_TYPES_LIMIT = 50

# Security Hub accepts at most 100 findings per BatchImportFindings call
UPLOAD_CHUNK_SIZE = 100
FILE_CHUNK_SIZE = 20


@dataclass(frozen=True)
class ConversionContext:
    """Immutable per-run context passed into every builder"""

    target: str
    aws_account_id: str
    region: str
    input_filename: str = ""
    severity_table: Dict[float, str] = field(default_factory=lambda: dict(SEVERITY_BY_IMPACT))

    def __post_init__(self):
        object.__setattr__(self, "target", self.target.lower().strip())

    @classmethod
    def from_options(cls, target: str, aws_account_id: str, region: str,
                     input_path: Optional[str] = None) -> "ConversionContext":
        """Build the context from command-line values"""
        # PureWindowsPath splits on both "/" and "\"
        filename = PureWindowsPath(str(input_path)).name if input_path else ""
        return cls(
            target=target,
            aws_account_id=aws_account_id,
            region=region,
            input_filename=filename,
        )

    @property
    def product_arn(self) -> str:
        return (
            f"arn:aws:securityhub:{self.region}:{self.aws_account_id}:"
            f"product/{self.aws_account_id}/default"
        )

    def generator_id(self, profile_name: str, control_id: Optional[str] = None) -> str:
        """GeneratorId for a ruleset, or for one rule inside it"""
        generator = (
            f"arn:aws:securityhub:{self.region}:{self.aws_account_id}:"
            f"ruleset/set/{profile_name}"
        )
        if control_id is not None:
            generator += f"/rule/{control_id}"
        return generator

    def severity_for(self, impact: float) -> str:
        """Map an impact value to a severity label"""
        return self.severity_table.get(impact, DEFAULT_SEVERITY)

    def account_resource(self) -> Dict[str, str]:
        """ASFF resource entry for the AWS account"""
        return {
            "Type": "AwsAccount",
            "Id": f"AWS::::Account:{self.aws_account_id}",
            "Partition": "aws",
            "Region": self.region,
        }
