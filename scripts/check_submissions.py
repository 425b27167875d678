#!/usr/bin/env python3
"""Check a batch of text submissions for plagiarism.

Loads submissions (JSON, CSV, or a directory of .txt files), scores every
pair with word n-gram Jaccard similarity and writes:
- a JSON report (input for generate_plagiarism_html.py)
- a CSV summary, one row per flagged pair (input for plot_similarity.py)
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from plagiarism_models import PlagiarismReport, PlagiarismSeverity
from similarity_engine import EngineConfig, ExcerptStrategy, SimilarityEngine
from submission_loader import SubmissionLoadError, load_submissions

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
CSV_FIELDS = ["student_a", "student_b", "student_id_a", "student_id_b", "similarity", "severity", "excerpts"]


def configure_logging(log_file: Optional[Path] = None, verbose: bool = False) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers[:] = []
    for handler in handlers:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------
def write_report_json(output_path: Path, report: PlagiarismReport) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(report.model_dump(mode="json"), f, indent=2)


def write_report_csv(output_path: Path, report: PlagiarismReport) -> None:
    """Write one CSV row per flagged pair, in report order."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for match in report.matches:
            writer.writerow({
                "student_a": match.student_name_a,
                "student_b": match.student_name_b,
                "student_id_a": match.student_id_a,
                "student_id_b": match.student_id_b,
                "similarity": round(match.similarity_percentage, 2),
                "severity": match.severity.value,
                "excerpts": len(match.matching_excerpts),
            })


def print_summary(report: PlagiarismReport) -> None:
    print("\n" + "=" * 70)
    print(f"PLAGIARISM CHECK: {report.assignment_title}")
    print("=" * 70)
    print(f"Submissions checked: {report.total_submissions_checked}")
    print(f"Flagged pairs: {report.flagged_count}")

    icons = {
        PlagiarismSeverity.high: "🚨",
        PlagiarismSeverity.medium: "⚠️ ",
        PlagiarismSeverity.low: "📋",
    }
    for severity, icon in icons.items():
        tier = [m for m in report.matches if m.severity == severity]
        print(f"\n{icon} {severity.display_name.upper()}: {len(tier)} pairs")
        for match in tier:
            print(
                f"   • {match.student_name_a} <-> {match.student_name_b} "
                f"({match.similarity_percentage:.1f}%)"
            )
            for excerpt in match.matching_excerpts[:1]:
                print(f"     - \"{excerpt.excerpt_a}\"")

    if not report.matches:
        print("\n✅ No significant plagiarism detected!")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Detect text plagiarism between assignment submissions")
    parser.add_argument("input", type=Path, help="Submissions .json/.csv file or directory of .txt files")
    parser.add_argument("--assignment-id", default="", help="Assignment identifier copied into the report")
    parser.add_argument("--assignment-title", default=None, help="Assignment title (default: input name)")
    parser.add_argument("--output", default="results/plagiarism_report.json", help="JSON report output")
    parser.add_argument("--csv-output", default="results/plagiarism_scores.csv", help="CSV summary output")
    parser.add_argument(
        "--ngram-size", type=int, default=int(os.environ.get("PLAGIARISM_NGRAM_SIZE", 3)),
        help="Words per n-gram",
    )
    parser.add_argument(
        "--threshold", type=float, default=float(os.environ.get("PLAGIARISM_THRESHOLD", 50.0)),
        help="Minimum similarity percentage to flag a pair",
    )
    parser.add_argument(
        "--min-words", type=int, default=int(os.environ.get("PLAGIARISM_MIN_WORDS", 10)),
        help="Submissions with fewer words are skipped",
    )
    parser.add_argument(
        "--workers", type=int, default=int(os.environ.get("PLAGIARISM_WORKERS", 1)),
        help="Threads used for pair comparison",
    )
    parser.add_argument("--best-fit", action="store_true", help="Pick the longest run for each excerpt anchor")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write logs to this file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.verbose)

    try:
        config = EngineConfig(
            ngram_size=args.ngram_size,
            minimum_similarity_threshold=args.threshold,
            minimum_word_count=args.min_words,
            excerpt_strategy=ExcerptStrategy.best_fit if args.best_fit else ExcerptStrategy.first_fit,
            workers=args.workers,
        )
    except ValidationError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    try:
        submissions = load_submissions(args.input)
    except SubmissionLoadError as e:
        raise SystemExit(str(e))

    title = args.assignment_title or args.input.stem
    report = SimilarityEngine(config).check_submissions(
        submissions, args.assignment_id or title, title, show_progress=True
    )

    write_report_json(Path(args.output), report)
    print(f"Wrote detailed report to {args.output}")

    write_report_csv(Path(args.csv_output), report)
    print(f"Wrote CSV summary to {args.csv_output}")

    print_summary(report)


if __name__ == "__main__":
    main()
