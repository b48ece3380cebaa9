"""
Finding mapper

Converts every executed segment of every control into one ASFF finding. Titles,
descriptions and remediation text are cut to the ASFF field budgets; the
untruncated rule source of every overlay layer is embedded in the finding's
resource details, which the omission markers point readers to.
"""

import hashlib
import logging
from typing import Any, Dict, List

from ..config import (
    CHECK_LIMIT,
    DESCRIPTION_LIMIT,
    REMEDIATION_LIMIT,
    STATUS_REASON_LIMIT,
    TITLE_LIMIT,
)
from ..hdf.models import PROFILE_INFO_FIELDS, Control, Evaluation, ListTag, Result, ScalarTag
from ..hdf.overlays import ControlLayer, resolve_layers
from .base_mapper import BaseMapper, utc_now
from .text import (
    FULL_TEXT_LOCATION,
    clean_text,
    format_impact,
    replace_slashes,
    strip_non_word,
    strip_to_alnum,
    truncate,
)

logger = logging.getLogger(__name__)

CHECK_UNAVAILABLE = "Check not available"
FIX_UNAVAILABLE = "Fix not available"

SEGMENT_FIELDS = (
    "code_desc",
    "exception",
    "message",
    "resource",
    "run_time",
    "start_time",
    "skip_message",
    "status",
)

# Array tags kept readable instead of being stripped to word characters
JOINED_TAGS = ("nist", "cci")

COMPLIANCE_STATUS = {
    "skipped": "WARNING",
    "passed": "PASSED",
}


def finding_id(target: str, profile_name: str, control_id: str, code_desc: str) -> str:
    """Stable identity of the finding for one segment of one control"""
    digest = hashlib.sha256((control_id + code_desc).encode("utf-8")).hexdigest()
    return f"{target}/{profile_name}/{control_id}/finding/{digest}"


def compliance_status(segment: Result) -> str:
    return COMPLIANCE_STATUS.get(segment.status, "FAILED")


def create_note(segment: Result) -> str:
    """Short human-readable account of what the segment tested"""
    if segment.message:
        return f"Test Description: {segment.code_desc} --- Test Result: {segment.message}"
    if segment.skip_message:
        return f"Test Description: {segment.code_desc} --- Skip Message: {segment.skip_message}"
    return f"Test Description: {segment.code_desc}"


def create_code(layer: ControlLayer) -> str:
    banner = "=" * 57
    code = layer.control.code.replace('\\"', '"')
    return f"{banner}\n# Profile name: {layer.profile.name}\n{banner}\n\n{code}"


def create_policy_document(layers: List[ControlLayer], segment: Result) -> str:
    """Source of every layer of the control followed by the segment note"""
    code = "\n\n".join(create_code(layer) for layer in layers)
    return f"{code}\n\n{create_note(segment)}"


def check_text(control: Control) -> str:
    check = control.description("check")
    if check:
        return check
    tag = control.tags.get("check")
    if isinstance(tag, ScalarTag) and tag.value:
        return tag.value
    return CHECK_UNAVAILABLE


def fix_text(control: Control) -> str:
    return control.description("fix") or control.fix or FIX_UNAVAILABLE


class FindingMapper(BaseMapper):
    """Mapper for HDF control results to ASFF findings"""

    def map(self, evaluation: Evaluation) -> List[Dict[str, Any]]:
        """Build one finding per (profile, control, segment), in document order"""
        findings = []
        for profile in evaluation.profiles:
            for control in profile.controls:
                layers = resolve_layers(evaluation, control)
                for segment in control.results:
                    findings.append(self.build(evaluation, control, layers, segment))

        logger.info(f"Built {len(findings)} findings from {len(evaluation.profiles)} profiles")
        return findings

    def build(self, evaluation: Evaluation, control: Control,
              layers: List[ControlLayer], segment: Result) -> Dict[str, Any]:
        """Build the finding for a single segment"""
        primary = layers[0].control
        primary_profile = evaluation.primary_profile.name
        checktext = check_text(primary)
        severity = self.context.severity_for(primary.impact)
        created_at = control.results[0].start_time if control.results and control.results[0].start_time else utc_now()

        finding = self.create_finding(
            finding_id=finding_id(self.context.target, primary_profile, control.id, segment.code_desc),
            generator_id=self.context.generator_id(primary_profile, control.id),
            created_at=created_at,
            title=self._title(primary),
            description=self._description(primary, checktext),
        )
        finding["Types"] = ["Software and Configuration Checks"]
        finding["Region"] = self.context.region
        finding["FindingProviderFields"] = {
            "Severity": self.create_severity(severity, severity),
            "Types": self._provider_types(control, layers, segment),
        }
        finding["Remediation"] = {
            "Recommendation": {
                "Text": truncate(
                    clean_text(f"{create_note(segment)} --- Fix: {fix_text(primary)}"),
                    REMEDIATION_LIMIT,
                    f"... {FULL_TEXT_LOCATION}",
                )
            }
        }
        finding["ProductFields"] = {"Check": truncate(checktext, CHECK_LIMIT)}
        finding["Severity"] = self.create_severity(severity, format_impact(primary.impact))
        finding["Resources"] = self.create_resources({
            "Id": f"{primary.id} Validation Code",
            "Type": "AwsIamRole",
            "Details": {
                "AwsIamRole": {
                    "AssumeRolePolicyDocument": create_policy_document(layers, segment)
                }
            },
        })
        finding["Compliance"] = {
            "RelatedRequirements": ["SEE REMEDIATION FIELD FOR RESULTS AND RECOMMENDED ACTION(S)"],
            "Status": compliance_status(segment),
            "StatusReasons": self._status_reasons(segment),
        }
        return finding

    def _title(self, control: Control) -> str:
        nist = control.tags.get("nist")
        if isinstance(nist, ListTag) and nist.values:
            nist_text = f"[{', '.join(nist.values)}]"
        elif isinstance(nist, ScalarTag) and nist.value:
            nist_text = f"[{nist.value}]"
        else:
            nist_text = ""
        return truncate(f"{control.id} | {nist_text} | {clean_text(control.title)}", TITLE_LIMIT)

    def _description(self, control: Control, checktext: str) -> str:
        description = truncate(
            clean_text(f"{control.desc} -- Check Text: {checktext}"),
            DESCRIPTION_LIMIT,
            FULL_TEXT_LOCATION,
        )
        caveat = control.description("caveat")
        if caveat:
            description = truncate(
                f"Caveat: {clean_text(caveat)} --- Description: {description}",
                DESCRIPTION_LIMIT,
            )
        return description

    def _status_reasons(self, segment: Result) -> List[Dict[str, str]]:
        if not segment.message:
            return []
        return [{
            "ReasonCode": "CONFIG_EVALUATIONS_EMPTY",
            "Description": truncate(clean_text(segment.message) or "Unavailable", STATUS_REASON_LIMIT),
        }]

    def _provider_types(self, control: Control, layers: List[ControlLayer],
                        segment: Result) -> List[str]:
        """Flattened provenance of the finding"""
        types = [
            f"File/Input/{self.context.input_filename}",
            f"Control/Code/{replace_slashes(control.code)}",
        ]

        for layer in layers:
            for name in PROFILE_INFO_FIELDS:
                value = layer.profile_info[name]
                if value:
                    types.append(f"Profile/{name}/{replace_slashes(value)}")

        for name in SEGMENT_FIELDS:
            value = getattr(segment, name)
            if value is None or value == "":
                continue
            types.append(f"Segment/{name}/{replace_slashes(str(value))}")

        for name, tag in layers[0].control.tags.items():
            entry = self._tag_type(name, tag)
            if entry:
                types.append(entry)

        for description in layers[0].control.descriptions:
            if description.data:
                types.append(
                    f"Descriptions/{strip_non_word(description.label)}/"
                    f"{strip_to_alnum(clean_text(description.data))}"
                )
        return types

    def _tag_type(self, name: str, tag) -> str:
        if isinstance(tag, ListTag):
            if not tag.values:
                return ""
            joined = ", ".join(tag.values)
            if name in JOINED_TAGS:
                return f"Tags/{name}/{joined}"
            return f"Tags/{strip_non_word(name)}/{strip_non_word(joined)}"
        if isinstance(tag, ScalarTag):
            if not tag.value:
                return ""
            return f"Tags/{strip_non_word(name)}/{strip_non_word(tag.value)}"
        # Booleans, numbers and nested objects carry no flattenable text
        return ""
