"""
Pydantic models for plagiarism check input and reports.

These models keep the engine output a plain, validated value that can be
dumped to JSON for the HTML/CSV writers and read back later.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import List
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field


HIGH_SEVERITY_THRESHOLD = 85.0
MEDIUM_SEVERITY_THRESHOLD = 70.0


class PlagiarismSeverity(str, Enum):
    """Severity tier used for colour coding."""
    high = "high"      # >= 85%
    medium = "medium"  # 70-85%
    low = "low"        # 50-70%

    @property
    def display_name(self) -> str:
        return self.value.title()


def classify_severity(similarity_percentage: float) -> PlagiarismSeverity:
    """Map a similarity percentage to its severity tier."""
    if similarity_percentage >= HIGH_SEVERITY_THRESHOLD:
        return PlagiarismSeverity.high
    if similarity_percentage >= MEDIUM_SEVERITY_THRESHOLD:
        return PlagiarismSeverity.medium
    return PlagiarismSeverity.low


# =============================================================================
# Input
# =============================================================================

class Submission(BaseModel):
    """One student's text submission for an assignment."""
    model_config = ConfigDict(frozen=True)

    student_id: str = Field(..., description="Stable identifier of the submitter")
    student_name: str = Field(..., description="Display name, used for labelling only")
    text: str = Field(..., description="Raw submission text")


# =============================================================================
# Output
# =============================================================================

class ExcerptPair(BaseModel):
    """Overlapping snippet from each of the two compared texts."""
    excerpt_a: str
    excerpt_b: str


class PlagiarismMatch(BaseModel):
    """A pair of submissions flagged for similarity."""
    id: UUID = Field(default_factory=uuid4)
    student_name_a: str
    student_name_b: str
    student_id_a: str
    student_id_b: str
    similarity_percentage: float = Field(..., ge=0, le=100)
    matching_excerpts: List[ExcerptPair] = Field(default_factory=list)

    @computed_field
    @property
    def severity(self) -> PlagiarismSeverity:
        return classify_severity(self.similarity_percentage)

    def involves(self, student_id: str) -> bool:
        return student_id in (self.student_id_a, self.student_id_b)


class PlagiarismReport(BaseModel):
    """
    Full plagiarism report for one assignment.

    Severity counts are derived from ``matches`` whenever they are read and
    are included in JSON dumps for consumers that only see the file.
    """
    assignment_id: str
    assignment_title: str
    total_submissions_checked: int = Field(..., ge=0)
    matches: List[PlagiarismMatch] = Field(default_factory=list)
    run_date: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @computed_field
    @property
    def flagged_count(self) -> int:
        return len(self.matches)

    @computed_field
    @property
    def high_severity_count(self) -> int:
        return self._count(PlagiarismSeverity.high)

    @computed_field
    @property
    def medium_severity_count(self) -> int:
        return self._count(PlagiarismSeverity.medium)

    @computed_field
    @property
    def low_severity_count(self) -> int:
        return self._count(PlagiarismSeverity.low)

    def _count(self, severity: PlagiarismSeverity) -> int:
        return sum(1 for match in self.matches if match.severity == severity)

    def matches_for_student(self, student_id: str) -> List[PlagiarismMatch]:
        return [match for match in self.matches if match.involves(student_id)]


# =============================================================================
# JSON Schema export
# =============================================================================

def get_json_schema() -> dict:
    """Get JSON schema of the report."""
    return PlagiarismReport.model_json_schema(mode="serialization")


def get_json_schema_str() -> str:
    """Get JSON schema as formatted string."""
    import json
    return json.dumps(get_json_schema(), indent=2)


if __name__ == "__main__":
    # Print schema for reference
    print(get_json_schema_str())
