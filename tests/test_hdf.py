"""Tests for the HDF evaluation model, overlay resolver and status aggregator.

Covers:
- models: defaults for absent fields, tag variants, derived control status
- overlays: layer collection across profiles, canonical de-duplication
- statistics: counts per status bucket, count conservation, summary wording
"""

import pytest

from hdf2asff.hdf import (
    Control,
    Evaluation,
    ListTag,
    ScalarTag,
    UnknownTag,
    count,
    create_description,
    resolve_canonical_controls,
    resolve_layers,
    tag_from_value,
)
from hdf2asff.hdf.statistics import Counts


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


def test_evaluation_requires_a_profile():
    with pytest.raises(ValueError):
        Evaluation.from_dict({"profiles": []})


def test_absent_fields_fall_back_to_defaults():
    evaluation = Evaluation.from_dict({"profiles": [{"name": "p", "controls": [{"id": "C-1"}]}]})

    control = evaluation.primary_profile.controls[0]
    assert control.title == ""
    assert control.impact == 0.0
    assert control.tags == {}
    assert control.results == ()
    assert evaluation.primary_profile.version == ""


def test_malformed_control_fields_fall_back_to_defaults():
    evaluation = Evaluation.from_dict({"profiles": [{"name": "p", "controls": [
        {"id": "C-1", "impact": "high", "tags": ["not", "a", "map"],
         "results": [{"code_desc": "no status"}, "junk"]},
        "junk",
    ]}]})

    [control] = evaluation.primary_profile.controls
    assert control.impact == 0.0
    assert control.tags == {}
    assert [r.code_desc for r in control.results] == ["no status"]
    assert control.results[0].status == ""


def test_tag_variants():
    assert tag_from_value("medium") == ScalarTag("medium")
    assert tag_from_value(["AC-1", "AC-2"]) == ListTag(("AC-1", "AC-2"))
    assert isinstance(tag_from_value(True), UnknownTag)
    assert isinstance(tag_from_value({"nested": 1}), UnknownTag)
    assert tag_from_value([1, 2]) == ListTag(("1", "2"))
    assert tag_from_value([0.5, True]) == ListTag(("0.5", "true"))
    assert isinstance(tag_from_value([{"id": 1}]), UnknownTag)


def test_attribute_value_comes_from_options():
    evaluation = Evaluation.from_dict({"profiles": [{
        "name": "p", "controls": [],
        "attributes": [{"name": "max_logins", "options": {"value": 3}}],
    }]})

    attribute = evaluation.primary_profile.attributes[0]
    assert attribute.name == "max_logins"
    assert attribute.value == 3


@pytest.mark.parametrize("statuses, impact, expected", [
    (["passed", "passed"], 0.5, "Passed"),
    (["passed", "failed"], 0.5, "Failed"),
    (["skipped"], 0.5, "Not Reviewed"),
    ([], 0.7, "Not Reviewed"),
    (["failed"], 0.0, "Not Applicable"),
    (["passed", "error"], 0.5, "Profile Error"),
])
def test_control_status(make_control, make_result, statuses, impact, expected):
    control = Control.from_dict(
        make_control(results=[make_result(status=s) for s in statuses], impact=impact)
    )
    assert control.status == expected


def test_description_lookup_skips_empty_data():
    control = Control.from_dict({"id": "C-1", "descriptions": [
        {"label": "check", "data": ""},
        {"label": "check", "data": "second"},
    ]})
    assert control.description("check") == "second"
    assert control.description("fix") is None


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------


def test_single_profile_yields_single_layer(make_document, make_profile):
    evaluation = Evaluation.from_dict(make_document(make_profile(name="only")))
    control = evaluation.primary_profile.controls[0]

    layers = resolve_layers(evaluation, control)

    assert len(layers) == 1
    assert layers[0].control is control
    assert layers[0].profile.name == "only"
    assert layers[0].profile_info["name"] == "only"


def test_every_overlay_layer_is_returned_in_profile_order(make_document, make_profile, make_control):
    names = ["overlay-a", "overlay-b", "baseline"]
    evaluation = Evaluation.from_dict(make_document(*[
        make_profile(name=name, controls=[make_control("X"), make_control(f"other-{name}")])
        for name in names
    ]))
    control = evaluation.profiles[2].controls[0]

    layers = resolve_layers(evaluation, control)

    assert [layer.profile.name for layer in layers] == names
    assert all(layer.control.id == "X" for layer in layers)


def test_unmatched_control_still_resolves_to_itself(make_document, make_profile, make_control):
    evaluation = Evaluation.from_dict(make_document(
        make_profile(name="a", controls=[make_control("A-1")]),
        make_profile(name="b", controls=[make_control("B-1")]),
    ))
    control = evaluation.profiles[1].controls[0]

    layers = resolve_layers(evaluation, control)

    assert len(layers) == 1
    assert layers[0].control is control
    assert layers[0].profile.name == "b"


def test_canonical_prefers_layer_with_results(make_document, make_profile, make_control):
    evaluation = Evaluation.from_dict(make_document(
        make_profile(name="overlay", controls=[make_control("X", results=[])]),
        make_profile(name="baseline", controls=[make_control("X")]),
    ))

    canonical = resolve_canonical_controls(evaluation)

    assert len(canonical) == 1
    assert canonical[0] is evaluation.profiles[1].controls[0]


def test_canonical_later_layer_with_results_wins(make_document, make_profile, make_control):
    evaluation = Evaluation.from_dict(make_document(
        make_profile(name="first", controls=[make_control("X")]),
        make_profile(name="second", controls=[make_control("X")]),
    ))

    canonical = resolve_canonical_controls(evaluation)

    assert len(canonical) == 1
    assert canonical[0] is evaluation.profiles[1].controls[0]


def test_canonical_later_layer_without_results_is_ignored(make_document, make_profile, make_control):
    evaluation = Evaluation.from_dict(make_document(
        make_profile(name="baseline", controls=[make_control("X")]),
        make_profile(name="overlay", controls=[make_control("X", results=[])]),
    ))

    canonical = resolve_canonical_controls(evaluation)

    assert canonical[0] is evaluation.profiles[0].controls[0]


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def test_failed_control_with_mixed_segments(make_document, make_profile, make_control, make_result):
    evaluation = Evaluation.from_dict(make_document(make_profile(controls=[
        make_control("SV-1", results=[
            make_result(status="failed", code_desc="a"),
            make_result(status="passed", code_desc="b"),
        ]),
    ])))

    assert count(evaluation) == Counts(Failed=1, FailedTests=1, PassingTestsFailedControl=1)


def test_counts_are_conserved(make_document, make_profile, make_control, make_result):
    controls = [
        make_control("P-1", results=[make_result(), make_result(code_desc="x")]),
        make_control("F-1", results=[make_result(status="failed"), make_result(status="failed"),
                                     make_result(status="passed")]),
        make_control("F-2", results=[make_result(status="failed")]),
        make_control("NA-1", impact=0.0),
        make_control("NR-1", results=[make_result(status="skipped")]),
        make_control("NR-2", results=[]),
    ]
    evaluation = Evaluation.from_dict(make_document(
        make_profile(name="overlay", controls=[make_control("P-1", results=[])]),
        make_profile(name="baseline", controls=controls),
    ))

    counts = count(evaluation)

    assert counts.Passed + counts.Failed + counts.NotApplicable + counts.NotReviewed == 6
    assert counts.Passed == 1
    assert counts.PassedTests == 2
    assert counts.Failed == 2
    assert counts.PassingTestsFailedControl + counts.FailedTests == 4
    assert counts.NotApplicable == 1
    assert counts.NotReviewed == 2


def test_overlay_results_are_replaced_by_later_baseline_results(make_document, make_profile, make_control,
                                                               make_result):
    evaluation = Evaluation.from_dict(make_document(
        make_profile(name="overlay", controls=[make_control("X", results=[make_result(status="passed")])]),
        make_profile(name="baseline", controls=[make_control("X", results=[make_result(status="failed")])]),
    ))

    counts = count(evaluation)

    assert counts.Failed == 1
    assert counts.FailedTests == 1
    assert counts.Passed == 0


def test_profile_error_is_not_counted(make_document, make_profile, make_control, make_result):
    evaluation = Evaluation.from_dict(make_document(make_profile(controls=[
        make_control("E-1", results=[make_result(status="error")]),
    ])))

    assert count(evaluation) == Counts()


def test_summary_description_wording():
    counts = Counts(Passed=3, PassedTests=7, Failed=2, FailedTests=4,
                    PassingTestsFailedControl=1, NotApplicable=5, NotReviewed=6)

    assert create_description(counts) == (
        "Passed: 3 (7 individual checks passed) --- "
        "Failed: 2 (1 individual checks failed out of 5 total checks) --- "
        "Not Applicable: 5 (System exception or absent component) --- "
        "Not Reviewed: 6 (Can only be tested manually at this time)"
    )
