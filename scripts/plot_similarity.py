#!/usr/bin/env python3
"""Plot plagiarism results produced by scripts/check_submissions.py.

Reads the CSV summary (results/plagiarism_scores.csv by default) and writes a
PNG plot summarizing the most similar submission pairs.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

REQUIRED_COLUMNS = {"student_a", "student_b", "student_id_a", "student_id_b", "similarity", "severity"}
SEVERITY_COLORS = {"high": "#C44E52", "medium": "#DD8452", "low": "#4C72B0"}


def label_students(df: pd.DataFrame) -> pd.DataFrame:
    """Add "name (id)" labels; names can repeat, ids cannot."""
    df = df.copy()
    df["label_a"] = df["student_a"].astype(str) + " (" + df["student_id_a"].astype(str) + ")"
    df["label_b"] = df["student_b"].astype(str) + " (" + df["student_id_b"].astype(str) + ")"
    df["pair"] = df["label_a"] + " ↔ " + df["label_b"]
    return df


def similarity_matrix(df: pd.DataFrame) -> pd.DataFrame:
    """Symmetric student x student similarity table from labelled pairs."""
    students = sorted(set(df["label_a"]) | set(df["label_b"]))
    heat_df = pd.DataFrame(0.0, index=students, columns=students)
    for _, row in df.iterrows():
        heat_df.loc[row["label_a"], row["label_b"]] = row["similarity"]
        heat_df.loc[row["label_b"], row["label_a"]] = row["similarity"]
    return heat_df


def make_plot(df: pd.DataFrame, out_path: Path, top_n: int) -> None:
    df = label_students(df)

    # Top-N by similarity
    top = df.sort_values("similarity", ascending=False).head(top_n)

    fig, axes = plt.subplots(1, 3, figsize=(22, 7))

    # Top pairs (bar), coloured by severity
    axes[0].barh(
        top["pair"],
        top["similarity"],
        color=[SEVERITY_COLORS.get(s, "#888888") for s in top["severity"]],
    )
    axes[0].invert_yaxis()
    axes[0].set_xlim(0, 100)
    axes[0].set_xlabel("Similarity (%)")
    axes[0].set_title(f"Top {top_n} flagged pairs")

    # Heatmap over students involved in the top pairs
    heat_df = similarity_matrix(top)
    students = list(heat_df.index)

    im = axes[1].imshow(heat_df.values, cmap="Reds", vmin=0, vmax=100)
    axes[1].set_xticks(range(len(students)))
    axes[1].set_xticklabels(students, rotation=45, ha="right", fontsize=8)
    axes[1].set_yticks(range(len(students)))
    axes[1].set_yticklabels(students, fontsize=8)
    axes[1].set_title("Similarity heatmap (top pairs)")
    fig.colorbar(im, ax=axes[1], fraction=0.046, pad=0.04)

    # Histogram of similarities
    axes[2].hist(df["similarity"], bins=10, range=(50, 100), color="#C44E52", alpha=0.8)
    axes[2].set_xlabel("Similarity (%)")
    axes[2].set_ylabel("Pairs")
    axes[2].set_title("Similarity distribution")

    fig.tight_layout()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)


def main() -> None:
    parser = argparse.ArgumentParser(description="Plot plagiarism check results.")
    parser.add_argument(
        "--input",
        default="results/plagiarism_scores.csv",
        help="CSV produced by check_submissions.py",
    )
    parser.add_argument(
        "--output",
        default="results/plagiarism_scores.png",
        help="Where to write the plot PNG",
    )
    parser.add_argument("--top-n", type=int, default=20, help="Top pairs to plot")
    args = parser.parse_args()

    csv_path = Path(args.input)
    if not csv_path.exists():
        raise SystemExit(f"Input CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)
    if not REQUIRED_COLUMNS.issubset(df.columns):
        raise SystemExit(f"CSV missing columns: {REQUIRED_COLUMNS - set(df.columns)}")
    if df.empty:
        raise SystemExit("No flagged pairs to plot")

    make_plot(df, Path(args.output), args.top_n)
    print(f"Wrote plot to {args.output}")


if __name__ == "__main__":
    main()
