"""Test fixtures for hdf2asff.

Provides:
- make_result / make_control / make_profile / make_document: builders for HDF
  documents as plain dicts, with realistic defaults
- context: a ConversionContext for a fixed target and account
- hdf_file: writes a document to a temporary JSON file
"""

import json
from typing import Any, Dict, List, Optional

import pytest

from hdf2asff.config import ConversionContext

PROFILE_METADATA = {
    "version": "1.2.0",
    "sha256": "a" * 64,
    "title": "Baseline Profile",
    "maintainer": "Security Team",
    "summary": "Baseline checks",
    "license": "Apache-2.0",
    "copyright": "Example Org",
    "copyright_email": "security@example.org",
}


def build_result(status: str = "passed", code_desc: str = "File /etc/passwd should exist",
                 start_time: str = "2023-03-01T10:00:00+00:00", **extra: Any) -> Dict[str, Any]:
    return {"status": status, "code_desc": code_desc, "start_time": start_time,
            "run_time": 0.01, **extra}


def build_control(control_id: str = "SV-1", results: Optional[List[Dict[str, Any]]] = None,
                  impact: float = 0.5, **extra: Any) -> Dict[str, Any]:
    control = {
        "id": control_id,
        "title": f"Control {control_id}",
        "desc": f"Description of {control_id}",
        "impact": impact,
        "code": f"control '{control_id}' do\n  describe file('/etc/passwd') do\n  end\nend",
        "tags": {"nist": ["AC-1", "AC-2"], "severity": "medium"},
        "descriptions": [{"label": "check", "data": f"Check {control_id}"},
                         {"label": "fix", "data": f"Fix {control_id}"}],
        "results": [build_result()] if results is None else results,
    }
    control.update(extra)
    return control


def build_profile(name: str = "baseline", controls: Optional[List[Dict[str, Any]]] = None,
                  **extra: Any) -> Dict[str, Any]:
    profile = {"name": name, **PROFILE_METADATA, "attributes": [],
               "controls": [build_control()] if controls is None else controls}
    profile.update(extra)
    return profile


def build_document(*profiles: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "platform": {"name": "ubuntu", "release": "22.04"},
        "profiles": list(profiles) or [build_profile()],
        "statistics": {"duration": 1.5},
        "version": "5.18.14",
    }


@pytest.fixture()
def make_result():
    return build_result


@pytest.fixture()
def make_control():
    return build_control


@pytest.fixture()
def make_profile():
    return build_profile


@pytest.fixture()
def make_document():
    return build_document


@pytest.fixture()
def context() -> ConversionContext:
    """Return a context for target 'web-01' in a fixed account."""
    return ConversionContext(
        target="  Web-01 ",
        aws_account_id="123456789012",
        region="us-east-1",
        input_filename="results.json",
    )


@pytest.fixture()
def hdf_file(tmp_path):
    """Write a document to results.json under tmp_path and return the path."""
    def _write(document: Dict[str, Any], name: str = "results.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path
    return _write
