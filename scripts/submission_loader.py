"""Load assignment submissions from disk for a plagiarism check.

Supported inputs:
- ``.json``: a list of ``{"student_id", "student_name", "text"}`` objects,
  or an object holding that list under ``"submissions"``
- ``.csv``: the same columns, one submission per row
- a directory of ``.txt`` files, one per student (file stem is the id)
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from plagiarism_models import Submission

logger = logging.getLogger(__name__)

ATTACHMENTS_MARKER = "[Attachments]"
UNKNOWN_STUDENT = "Unknown Student"
INPUT_ENCODING = "utf-8-sig"


class SubmissionLoadError(ValueError):
    """Raised when a submissions file cannot be read."""


def clean_submission_text(text: Optional[str]) -> Optional[str]:
    """Strip the attachment listing appended to submission text.

    Returns None when nothing usable is left.
    """
    if text is None:
        return None
    for marker in ("\n\n" + ATTACHMENTS_MARKER, ATTACHMENTS_MARKER):
        index = text.find(marker)
        if index != -1:
            text = text[:index]
            break
    text = text.strip()
    return text or None


def _to_submission(record: Dict[str, Any], source: str) -> Optional[Submission]:
    raw_text = record.get("text")
    if raw_text is not None and not isinstance(raw_text, str):
        raise SubmissionLoadError(f"{source}: text must be a string")

    text = clean_submission_text(raw_text)
    if text is None:
        logger.warning("Skipping %s: empty submission text", source)
        return None

    student_id = record.get("student_id")
    if student_id in (None, ""):
        raise SubmissionLoadError(f"{source}: missing student_id")

    try:
        return Submission(
            student_id=str(student_id),
            student_name=record.get("student_name") or UNKNOWN_STUDENT,
            text=text,
        )
    except ValidationError as e:
        raise SubmissionLoadError(f"{source}: {e}") from e


def _read_text(path: Path) -> str:
    """Read a UTF-8 file, dropping a leading byte-order mark."""
    try:
        return path.read_text(encoding=INPUT_ENCODING)
    except UnicodeDecodeError as e:
        raise SubmissionLoadError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e


def load_json_submissions(path: Path) -> List[Submission]:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise SubmissionLoadError(f"{path}: invalid JSON ({e})") from e

    if isinstance(data, dict):
        data = data.get("submissions")
    if not isinstance(data, list):
        raise SubmissionLoadError(f"{path}: expected a list of submissions")

    submissions = []
    for idx, record in enumerate(data):
        if not isinstance(record, dict):
            raise SubmissionLoadError(f"{path}[{idx}]: expected an object")
        submission = _to_submission(record, f"{path}[{idx}]")
        if submission:
            submissions.append(submission)
    return submissions


def load_csv_submissions(path: Path) -> List[Submission]:
    submissions = []
    reader = csv.DictReader(io.StringIO(_read_text(path), newline=""))
    for line_no, raw in enumerate(reader, start=2):
        row = {
            k.strip(): (v.strip() if v is not None else "")
            for k, v in raw.items()
            if k
        }
        if not any(row.values()):
            continue
        submission = _to_submission(row, f"{path}:{line_no}")
        if submission:
            submissions.append(submission)
    return submissions


def load_directory_submissions(path: Path) -> List[Submission]:
    submissions = []
    for file_path in sorted(path.glob("*.txt")):
        submission = _to_submission(
            {"student_id": file_path.stem, "student_name": file_path.stem, "text": _read_text(file_path)},
            str(file_path),
        )
        if submission:
            submissions.append(submission)
    return submissions


def load_submissions(path: Path) -> List[Submission]:
    """Load submissions from a JSON file, a CSV file, or a directory of .txt files."""
    path = Path(path)
    if not path.exists():
        raise SubmissionLoadError(f"Input not found: {path}")

    if path.is_dir():
        submissions = load_directory_submissions(path)
    elif path.suffix.lower() == ".json":
        submissions = load_json_submissions(path)
    elif path.suffix.lower() == ".csv":
        submissions = load_csv_submissions(path)
    else:
        raise SubmissionLoadError(f"Unsupported input format: {path.suffix or path.name}")

    logger.info("Loaded %d submissions from %s", len(submissions), path)
    return submissions
