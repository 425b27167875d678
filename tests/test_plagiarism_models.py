"""
Tests for plagiarism report models.
"""

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from plagiarism_models import (
    ExcerptPair,
    PlagiarismMatch,
    PlagiarismReport,
    PlagiarismSeverity,
    Submission,
    classify_severity,
    get_json_schema,
)


def _match(a: str, b: str, similarity: float, excerpts=None) -> PlagiarismMatch:
    return PlagiarismMatch(
        student_name_a=a.title(),
        student_name_b=b.title(),
        student_id_a=a,
        student_id_b=b,
        similarity_percentage=similarity,
        matching_excerpts=excerpts or [],
    )


@pytest.mark.parametrize(
    "percentage,expected",
    [
        (100.0, PlagiarismSeverity.high),
        (85.0, PlagiarismSeverity.high),
        (84.99, PlagiarismSeverity.medium),
        (70.0, PlagiarismSeverity.medium),
        (69.99, PlagiarismSeverity.low),
        (50.0, PlagiarismSeverity.low),
    ],
)
def test_classify_severity_tiers(percentage, expected):
    assert classify_severity(percentage) is expected
    assert _match("a", "b", percentage).severity is expected


def test_severity_display_names():
    assert [s.display_name for s in PlagiarismSeverity] == ["High", "Medium", "Low"]


def test_match_rejects_out_of_range_similarity():
    with pytest.raises(ValidationError):
        _match("a", "b", 100.5)
    with pytest.raises(ValidationError):
        _match("a", "b", -1)


def test_submission_is_immutable():
    submission = Submission(student_id="s1", student_name="Ada", text="hello")
    with pytest.raises(ValidationError):
        submission.text = "changed"


def test_report_counts_are_derived_from_matches():
    report = PlagiarismReport(
        assignment_id="hw1",
        assignment_title="Homework 1",
        total_submissions_checked=5,
        matches=[_match("a", "b", 92), _match("a", "c", 75), _match("b", "c", 71), _match("d", "e", 55)],
    )

    assert report.flagged_count == 4
    assert report.high_severity_count == 1
    assert report.medium_severity_count == 2
    assert report.low_severity_count == 1

    report.matches.pop()
    assert report.flagged_count == 3
    assert report.low_severity_count == 0


def test_matches_for_student():
    report = PlagiarismReport(
        assignment_id="hw1",
        assignment_title="Homework 1",
        total_submissions_checked=3,
        matches=[_match("a", "b", 92), _match("b", "c", 60)],
    )

    assert [m.student_id_a for m in report.matches_for_student("c")] == ["b"]
    assert len(report.matches_for_student("b")) == 2
    assert report.matches_for_student("z") == []


def test_report_json_round_trip():
    report = PlagiarismReport(
        assignment_id="hw1",
        assignment_title="Homework 1",
        total_submissions_checked=2,
        matches=[_match("a", "b", 88.5, [ExcerptPair(excerpt_a="same words", excerpt_b="same words")])],
    )

    dumped = report.model_dump(mode="json")
    assert dumped["flagged_count"] == 1
    assert dumped["high_severity_count"] == 1
    assert dumped["matches"][0]["severity"] == "high"
    assert isinstance(dumped["matches"][0]["id"], str)
    assert isinstance(dumped["run_date"], str)

    restored = PlagiarismReport.model_validate_json(json.dumps(dumped))
    assert restored.matches[0].id == report.matches[0].id
    assert restored.matches[0].matching_excerpts == report.matches[0].matching_excerpts
    assert restored.run_date == report.run_date
    assert isinstance(restored.run_date, datetime)


def test_json_schema_describes_report():
    schema = get_json_schema()
    assert "matches" in schema["properties"]
    assert "flagged_count" in schema["properties"]
