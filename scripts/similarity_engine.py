"""Text plagiarism detection for assignment submissions.

Scores every pair of submissions by the Jaccard similarity of their word
n-gram sets and, for pairs above the threshold, pulls out the longest
overlapping runs of words as evidence:
1. Drop submissions below the word-count floor
2. Normalize (lowercase, strip punctuation) and build word n-gram sets
3. Compare all pairs with Jaccard similarity
4. Extract excerpts by extending shared n-grams word by word
5. Sort matches by similarity, highest first

The engine is pure: no I/O, no state kept between calls.
"""

from __future__ import annotations

import concurrent.futures
import logging
import unicodedata
from dataclasses import dataclass
from enum import Enum
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from tqdm import tqdm

from plagiarism_models import ExcerptPair, PlagiarismMatch, PlagiarismReport, Submission

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
NGRAM_SIZE = 3  # word trigrams
MIN_SIMILARITY_THRESHOLD = 50.0  # percent
MIN_WORD_COUNT = 10
MAX_EXCERPT_LENGTH = 200  # characters
MAX_EXCERPTS_PER_MATCH = 3
ELLIPSIS = "..."


class ExcerptStrategy(str, Enum):
    """How a shared n-gram is anchored in the second text."""
    first_fit = "first_fit"  # earliest position in B that yields a long enough run
    best_fit = "best_fit"    # position in B that yields the longest run


class EngineConfig(BaseModel):
    """Tunable parameters of the similarity engine."""
    model_config = ConfigDict(frozen=True)

    ngram_size: int = Field(default=NGRAM_SIZE, ge=1)
    minimum_similarity_threshold: float = Field(default=MIN_SIMILARITY_THRESHOLD, ge=0, le=100)
    minimum_word_count: int = Field(default=MIN_WORD_COUNT, ge=0)
    max_excerpt_length: int = Field(default=MAX_EXCERPT_LENGTH, ge=1)
    max_excerpts_per_match: int = Field(default=MAX_EXCERPTS_PER_MATCH, ge=0, le=MAX_EXCERPTS_PER_MATCH)
    minimum_run_length: Optional[int] = Field(
        default=None, description="Shortest run kept as an excerpt (default: ngram_size + 2)"
    )
    excerpt_strategy: ExcerptStrategy = ExcerptStrategy.first_fit
    workers: int = Field(default=1, ge=1, description="Threads used for pair comparison")

    @model_validator(mode="after")
    def check_run_length(self) -> "EngineConfig":
        if self.minimum_run_length is not None and self.minimum_run_length < self.ngram_size:
            raise ValueError("minimum_run_length must be at least ngram_size")
        return self

    @property
    def effective_run_length(self) -> int:
        if self.minimum_run_length is None:
            return self.ngram_size + 2
        return self.minimum_run_length


@dataclass(frozen=True)
class NormalizedSubmission:
    """A submission that passed the length filter, with its n-gram set."""
    student_id: str
    student_name: str
    text: str
    ngrams: FrozenSet[str]


# ---------------------------------------------------------------------------
# Normalization & N-grams
# ---------------------------------------------------------------------------
def word_count(text: str) -> int:
    return len(text.split())


def normalize_text(text: str) -> str:
    """Lowercase, drop everything but letters/digits/marks/whitespace, collapse whitespace.

    Text is NFC-composed first so precomposed and decomposed accents compare equal.
    """
    composed = unicodedata.normalize("NFC", text.lower())
    cleaned = "".join(
        ch for ch in composed
        if ch.isalnum() or ch.isspace() or unicodedata.category(ch).startswith("M")
    )
    return " ".join(cleaned.split())


def tokenize(text: str) -> List[str]:
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []


def generate_ngrams(text: str, n: int = NGRAM_SIZE) -> FrozenSet[str]:
    """Set of space-joined word n-grams of the normalized text.

    Texts shorter than ``n`` words give a single gram holding the whole text,
    or an empty set when nothing survives normalization.
    """
    words = tokenize(text)
    if len(words) < n:
        return frozenset([" ".join(words)]) if words else frozenset()
    return frozenset(" ".join(words[i:i + n]) for i in range(len(words) - n + 1))


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------
def jaccard_similarity(set_a: FrozenSet[str], set_b: FrozenSet[str]) -> float:
    """|A & B| / |A | B|, 0.0 when both sets are empty."""
    union = len(set_a | set_b)
    if union == 0:
        return 0.0
    return len(set_a & set_b) / union


# ---------------------------------------------------------------------------
# Excerpts
# ---------------------------------------------------------------------------
def _ngram_positions(words: Sequence[str], n: int) -> Dict[str, List[int]]:
    positions: Dict[str, List[int]] = {}
    for i in range(len(words) - n + 1):
        positions.setdefault(" ".join(words[i:i + n]), []).append(i)
    return positions


def _extend_run(words_a: Sequence[str], words_b: Sequence[str], start_a: int, start_b: int, n: int) -> int:
    length = n
    while (
        start_a + length < len(words_a)
        and start_b + length < len(words_b)
        and words_a[start_a + length] == words_b[start_b + length]
    ):
        length += 1
    return length


def _truncate(excerpt: str, max_length: int) -> str:
    if len(excerpt) > max_length:
        return excerpt[:max_length] + ELLIPSIS
    return excerpt


def find_matching_runs(
    words_a: Sequence[str],
    words_b: Sequence[str],
    n: int = NGRAM_SIZE,
    min_run_length: Optional[int] = None,
    strategy: ExcerptStrategy = ExcerptStrategy.first_fit,
) -> List[Tuple[int, int, int]]:
    """Runs of identical words shared by A and B as (start_a, start_b, length).

    Runs are found scanning A left to right; positions of A already covered
    by an accepted run are not used as anchors again.
    """
    if min_run_length is None:
        min_run_length = n + 2
    b_positions = _ngram_positions(words_b, n)
    runs: List[Tuple[int, int, int]] = []
    used_a: set = set()

    for i in range(len(words_a) - n + 1):
        if i in used_a:
            continue
        candidates = b_positions.get(" ".join(words_a[i:i + n]))
        if not candidates:
            continue

        if strategy is ExcerptStrategy.best_fit:
            # max() keeps the earliest position on ties
            start_b, length = max(
                ((b, _extend_run(words_a, words_b, i, b, n)) for b in candidates),
                key=lambda item: item[1],
            )
            accepted = (start_b, length) if length >= min_run_length else None
        else:
            accepted = None
            for start_b in candidates:
                length = _extend_run(words_a, words_b, i, start_b, n)
                if length >= min_run_length:
                    accepted = (start_b, length)
                    break

        if accepted is not None:
            start_b, length = accepted
            runs.append((i, start_b, length))
            used_a.update(range(i, i + length))

    return runs


def find_matching_excerpts(text_a: str, text_b: str, config: Optional[EngineConfig] = None) -> List[ExcerptPair]:
    """Longest overlapping passages between two texts, as normalized words."""
    config = config or EngineConfig()
    words_a = tokenize(text_a)
    words_b = tokenize(text_b)

    runs = find_matching_runs(
        words_a,
        words_b,
        n=config.ngram_size,
        min_run_length=config.effective_run_length,
        strategy=config.excerpt_strategy,
    )
    top_runs = sorted(runs, key=lambda run: run[2], reverse=True)[: config.max_excerpts_per_match]

    return [
        ExcerptPair(
            excerpt_a=_truncate(" ".join(words_a[start_a:start_a + length]), config.max_excerpt_length),
            excerpt_b=_truncate(" ".join(words_b[start_b:start_b + length]), config.max_excerpt_length),
        )
        for start_a, start_b, length in top_runs
    ]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class SimilarityEngine:
    """Pairwise n-gram similarity checker for one batch of submissions."""

    def __init__(self, config: Optional[EngineConfig] = None, **overrides) -> None:
        if config is None:
            config = EngineConfig(**overrides)
        elif overrides:
            config = EngineConfig(**{**config.model_dump(), **overrides})
        self.config = config

    def prepare(self, submissions: Iterable[Submission]) -> List[NormalizedSubmission]:
        """Drop submissions below the word floor and build n-gram sets for the rest."""
        prepared = []
        for submission in submissions:
            words = word_count(submission.text)
            if words < self.config.minimum_word_count:
                logger.debug(
                    "Skipping %s: %d words (minimum %d)",
                    submission.student_id, words, self.config.minimum_word_count,
                )
                continue
            prepared.append(NormalizedSubmission(
                student_id=submission.student_id,
                student_name=submission.student_name,
                text=submission.text,
                ngrams=generate_ngrams(submission.text, self.config.ngram_size),
            ))
        return prepared

    def compare(self, a: NormalizedSubmission, b: NormalizedSubmission) -> Optional[PlagiarismMatch]:
        """Score one pair; a match is returned only at or above the threshold."""
        percentage = jaccard_similarity(a.ngrams, b.ngrams) * 100.0
        logger.debug("%s <-> %s: %.1f%%", a.student_id, b.student_id, percentage)
        if percentage < self.config.minimum_similarity_threshold:
            return None

        return PlagiarismMatch(
            student_name_a=a.student_name,
            student_name_b=b.student_name,
            student_id_a=a.student_id,
            student_id_b=b.student_id,
            similarity_percentage=percentage,
            matching_excerpts=find_matching_excerpts(a.text, b.text, self.config),
        )

    def check_submissions(
        self,
        submissions: Iterable[Submission],
        assignment_id: str,
        assignment_title: str,
        show_progress: bool = False,
    ) -> PlagiarismReport:
        """Run the plagiarism check on every pair of submissions for an assignment."""
        prepared = self.prepare(submissions)
        pairs = list(combinations(prepared, 2))

        with tqdm(total=len(pairs), desc="Comparing", disable=not show_progress) as pbar:
            if self.config.workers > 1 and len(pairs) > 1:
                with concurrent.futures.ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                    # map() yields in submission order, same as the sequential loop
                    results = []
                    for result in executor.map(lambda pair: self.compare(*pair), pairs):
                        results.append(result)
                        pbar.update(1)
            else:
                results = []
                for a, b in pairs:
                    results.append(self.compare(a, b))
                    pbar.update(1)

        matches = [match for match in results if match is not None]
        # Stable sort: ties keep pair order
        matches.sort(key=lambda match: match.similarity_percentage, reverse=True)

        report = PlagiarismReport(
            assignment_id=assignment_id,
            assignment_title=assignment_title,
            total_submissions_checked=len(prepared),
            matches=matches,
        )
        logger.info(
            "Checked %d submissions (%d pairs) for %r: %d flagged, %d high",
            report.total_submissions_checked, len(pairs), assignment_title,
            report.flagged_count, report.high_severity_count,
        )
        return report


def check_submissions(
    submissions: Iterable[Submission],
    assignment_id: str,
    assignment_title: str,
    config: Optional[EngineConfig] = None,
) -> PlagiarismReport:
    """Run a check with a fresh engine."""
    return SimilarityEngine(config).check_submissions(submissions, assignment_id, assignment_title)
