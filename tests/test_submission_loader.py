"""
Tests for loading submissions from JSON, CSV and text directories.
"""

import json
from pathlib import Path

import pytest

from submission_loader import (
    UNKNOWN_STUDENT,
    SubmissionLoadError,
    clean_submission_text,
    load_submissions,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, None),
        ("  plain answer  ", "plain answer"),
        ("Essay body\n\n[Attachments]\n- notes.pdf", "Essay body"),
        ("Essay body [Attachments] notes.pdf", "Essay body"),
        ("[Attachments]\n- notes.pdf", None),
        ("   ", None),
    ],
)
def test_clean_submission_text(raw, expected):
    assert clean_submission_text(raw) == expected


def test_load_json_list(tmp_path: Path):
    path = tmp_path / "subs.json"
    path.write_text(json.dumps([
        {"student_id": "s1", "student_name": "Ada", "text": "First essay\n\n[Attachments]\n- a.pdf"},
        {"student_id": 2, "text": "Second essay"},
        {"student_id": "s3", "student_name": "Empty", "text": ""},
    ]))

    submissions = load_submissions(path)

    assert [s.student_id for s in submissions] == ["s1", "2"]
    assert submissions[0].text == "First essay"
    assert submissions[1].student_name == UNKNOWN_STUDENT


def test_load_json_object_with_submissions_key(tmp_path: Path):
    path = tmp_path / "subs.json"
    path.write_text(json.dumps({"submissions": [{"student_id": "s1", "student_name": "Ada", "text": "Hi"}]}))

    assert len(load_submissions(path)) == 1


def test_load_json_missing_student_id(tmp_path: Path):
    path = tmp_path / "subs.json"
    path.write_text(json.dumps([{"student_name": "Ada", "text": "Hi there"}]))

    with pytest.raises(SubmissionLoadError, match="missing student_id"):
        load_submissions(path)


@pytest.mark.parametrize("content", ["{not json", '"just a string"', '[1, 2]'])
def test_load_json_malformed(tmp_path: Path, content):
    path = tmp_path / "subs.json"
    path.write_text(content)

    with pytest.raises(SubmissionLoadError):
        load_submissions(path)


def test_load_csv(tmp_path: Path):
    path = tmp_path / "subs.csv"
    path.write_text(
        " student_id , student_name , text \n"
        "s1,Ada,\"An essay, with commas\"\n"
        ",,\n"
        "s2,,Another essay\n",
        encoding="utf-8",
    )

    submissions = load_submissions(path)

    assert [s.student_id for s in submissions] == ["s1", "s2"]
    assert submissions[0].text == "An essay, with commas"
    assert submissions[1].student_name == UNKNOWN_STUDENT


def test_load_text_directory(tmp_path: Path):
    (tmp_path / "bob.txt").write_text("Bob's essay")
    (tmp_path / "alice.txt").write_text("Alice's essay")
    (tmp_path / "notes.md").write_text("ignored")

    submissions = load_submissions(tmp_path)

    assert [s.student_id for s in submissions] == ["alice", "bob"]
    assert submissions[0].student_name == "alice"


def test_load_missing_path(tmp_path: Path):
    with pytest.raises(SubmissionLoadError, match="not found"):
        load_submissions(tmp_path / "missing.json")


def test_load_unsupported_format(tmp_path: Path):
    path = tmp_path / "subs.xlsx"
    path.write_text("data")

    with pytest.raises(SubmissionLoadError, match="Unsupported"):
        load_submissions(path)


@pytest.mark.parametrize("text", [42, ["an", "essay"], {"body": "essay"}])
def test_load_json_non_string_text(tmp_path: Path, text):
    path = tmp_path / "subs.json"
    path.write_text(json.dumps([{"student_id": "s1", "student_name": "Ada", "text": text}]))

    with pytest.raises(SubmissionLoadError, match="text must be a string"):
        load_submissions(path)


def test_load_csv_with_byte_order_mark(tmp_path: Path):
    path = tmp_path / "subs.csv"
    path.write_text("student_id,student_name,text\ns1,Zoë,Un café noir\n", encoding="utf-8-sig")

    submissions = load_submissions(path)

    assert [s.student_id for s in submissions] == ["s1"]
    assert submissions[0].student_name == "Zoë"


def test_load_json_with_byte_order_mark(tmp_path: Path):
    path = tmp_path / "subs.json"
    path.write_text(json.dumps([{"student_id": "s1", "text": "Hi"}]), encoding="utf-8-sig")

    assert len(load_submissions(path)) == 1


@pytest.mark.parametrize("name", ["subs.csv", "subs.json"])
def test_load_non_utf8_file(tmp_path: Path, name):
    path = tmp_path / name
    path.write_bytes("student_id,text\ns1,Un café noir\n".encode("latin-1"))

    with pytest.raises(SubmissionLoadError, match="not valid UTF-8"):
        load_submissions(path)


def test_load_text_directory_rejects_non_utf8(tmp_path: Path):
    (tmp_path / "ada.txt").write_bytes("Un café noir".encode("latin-1"))

    with pytest.raises(SubmissionLoadError, match="not valid UTF-8"):
        load_submissions(tmp_path)
