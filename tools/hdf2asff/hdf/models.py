"""
Typed model of an HDF evaluation document

The loader builds these once from parsed JSON; everything downstream treats them
as read-only. Absent fields fall back to empty values instead of raising so a
malformed control only degrades its own findings.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

PROFILE_INFO_FIELDS = (
    "name",
    "version",
    "sha256",
    "title",
    "maintainer",
    "summary",
    "license",
    "copyright",
    "copyright_email",
)

# Control-level statuses
PASSED = "Passed"
FAILED = "Failed"
NOT_APPLICABLE = "Not Applicable"
NOT_REVIEWED = "Not Reviewed"
PROFILE_ERROR = "Profile Error"


def _objects(value: Any) -> List[Dict[str, Any]]:
    """Dict entries of a list, skipping anything malformed"""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else _text(value)


@dataclass(frozen=True)
class ScalarTag:
    value: str


@dataclass(frozen=True)
class ListTag:
    values: Tuple[str, ...]


@dataclass(frozen=True)
class UnknownTag:
    raw: Any


TagValue = Union[ScalarTag, ListTag, UnknownTag]


def tag_from_value(value: Any) -> TagValue:
    """Classify a raw tag value into one of the tag variants"""
    if isinstance(value, str):
        return ScalarTag(value)
    if isinstance(value, (list, tuple)) and all(isinstance(v, (str, int, float, bool)) for v in value):
        # Non-string scalars render as in JSON: 1, 0.5, true
        return ListTag(tuple(v if isinstance(v, str) else json.dumps(v) for v in value))
    return UnknownTag(value)


@dataclass(frozen=True)
class Description:
    label: str
    data: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Description":
        return cls(label=_text(data.get("label")), data=_text(data.get("data")))


@dataclass(frozen=True)
class Result:
    """One executed assertion (segment) inside a control"""

    status: str
    code_desc: str = ""
    start_time: str = ""
    run_time: Optional[float] = None
    message: Optional[str] = None
    exception: Optional[str] = None
    resource: Optional[str] = None
    skip_message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Result":
        return cls(
            status=_text(data.get("status")),
            code_desc=_text(data.get("code_desc")),
            start_time=_text(data.get("start_time")),
            run_time=data.get("run_time"),
            message=_optional_text(data.get("message")),
            exception=_optional_text(data.get("exception")),
            resource=_optional_text(data.get("resource")),
            skip_message=_optional_text(data.get("skip_message")),
        )


@dataclass(frozen=True)
class Control:
    """A compliance rule as declared inside one profile"""

    id: str
    title: str = ""
    desc: str = ""
    impact: float = 0.0
    fix: str = ""
    code: str = ""
    tags: Dict[str, TagValue] = field(default_factory=dict)
    descriptions: Tuple[Description, ...] = ()
    results: Tuple[Result, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Control":
        impact = data.get("impact")
        tags = data.get("tags")
        return cls(
            id=_text(data.get("id")),
            title=_text(data.get("title")),
            desc=_text(data.get("desc")),
            impact=impact if isinstance(impact, (int, float)) and not isinstance(impact, bool) else 0.0,
            fix=_text(data.get("fix")),
            code=_text(data.get("code")),
            tags={name: tag_from_value(value) for name, value in (tags if isinstance(tags, dict) else {}).items()},
            descriptions=tuple(Description.from_dict(d) for d in _objects(data.get("descriptions"))),
            results=tuple(Result.from_dict(r) for r in _objects(data.get("results"))),
        )

    def description(self, label: str) -> Optional[str]:
        """Data of the first description with the given label, if non-empty"""
        for description in self.descriptions:
            if description.label == label and description.data:
                return description.data
        return None

    @property
    def status_list(self) -> List[str]:
        return [result.status for result in self.results]

    @property
    def status(self) -> str:
        """Control-level status derived from its segments"""
        statuses = self.status_list
        if "error" in statuses:
            return PROFILE_ERROR
        if self.impact == 0:
            return NOT_APPLICABLE
        if "failed" in statuses:
            return FAILED
        if "passed" in statuses:
            return PASSED
        return NOT_REVIEWED


@dataclass(frozen=True)
class Attribute:
    """A profile input: name plus its configured value"""

    name: str
    value: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attribute":
        options = data.get("options")
        if not isinstance(options, dict):
            options = {}
        return cls(name=_text(data.get("name")), value=options.get("value"))


@dataclass(frozen=True)
class Profile:
    name: str
    version: str = ""
    sha256: str = ""
    title: str = ""
    maintainer: str = ""
    summary: str = ""
    license: str = ""
    copyright: str = ""
    copyright_email: str = ""
    controls: Tuple[Control, ...] = ()
    attributes: Tuple[Attribute, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        info = {name: _text(data.get(name)) for name in PROFILE_INFO_FIELDS}
        return cls(
            controls=tuple(Control.from_dict(c) for c in _objects(data.get("controls"))),
            attributes=tuple(Attribute.from_dict(a) for a in _objects(data.get("attributes"))),
            **info,
        )

    def provenance(self) -> Dict[str, str]:
        """Scalar metadata of the profile, without its controls"""
        return {name: getattr(self, name) for name in PROFILE_INFO_FIELDS}


@dataclass(frozen=True)
class Platform:
    name: str = ""
    release: str = ""


@dataclass(frozen=True)
class Evaluation:
    """Root of an HDF document; the first profile is the primary one"""

    profiles: Tuple[Profile, ...]
    platform: Platform = Platform()
    statistics: Dict[str, Any] = field(default_factory=dict)
    version: str = ""

    def __post_init__(self):
        if not self.profiles:
            raise ValueError("An evaluation must contain at least one profile")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Evaluation":
        platform = data.get("platform") or {}
        return cls(
            profiles=tuple(Profile.from_dict(p) for p in data.get("profiles") or []),
            platform=Platform(name=_text(platform.get("name")), release=_text(platform.get("release"))),
            statistics=dict(data.get("statistics") or {}),
            version=_text(data.get("version")),
        )

    @property
    def primary_profile(self) -> Profile:
        return self.profiles[0]
