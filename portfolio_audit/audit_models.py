# audit_models.py
"""
Pydantic models for GitHub data and the portfolio evaluation contract.
Every payload crossing the GitHub or model boundary is validated into one of these.
"""

from typing import Annotated, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


METRIC_NAMES: Tuple[str, ...] = (
    "documentation",
    "activity",
    "organization",
    "engagement",
    "depth",
    "impact",
)
GRADES: Tuple[str, ...] = ("S", "A", "B", "C", "D", "F")
PRIORITIES: Tuple[str, ...] = ("High", "Medium", "Low")

Grade = Literal["S", "A", "B", "C", "D", "F"]
Priority = Literal["High", "Medium", "Low"]


def _whole_number(value):
    # The schema declares plain JSON numbers; reject strings, booleans and fractions
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a whole number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(value)


Points = Annotated[int, BeforeValidator(_whole_number)]
Score = Annotated[int, BeforeValidator(_whole_number), Field(ge=0, le=100)]


# ------------------------------------------------------------------
# GitHub data
# ------------------------------------------------------------------
class GitHubProfile(BaseModel):
    """Public profile returned by GET /users/{handle}."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    login: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    public_repos: int = 0
    followers: int = 0
    following: int = 0
    created_at: Optional[str] = None
    blog: Optional[str] = None
    twitter_username: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.login


class RepositorySummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    description: Optional[str] = None
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    updated_at: Optional[str] = None
    html_url: Optional[str] = None
    fork: bool = False


# ------------------------------------------------------------------
# Request sent to the model
# ------------------------------------------------------------------
class RepositoryDigest(BaseModel):
    """Reduced repository view embedded in the prompt."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    stars: int = 0
    language: Optional[str] = None
    updated: Optional[str] = None


class EvaluationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    login: str
    bio: Optional[str] = None
    followers: int = 0
    repositories: List[RepositoryDigest] = Field(default_factory=list, max_length=15)


# ------------------------------------------------------------------
# Evaluation returned by the model
# ------------------------------------------------------------------
class AuditMetrics(BaseModel):
    """The six rubric dimensions. All mandatory, nothing else allowed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    documentation: Score
    activity: Score
    organization: Score
    engagement: Score
    depth: Score
    impact: Score

    def score_for(self, category: str) -> int:
        if category not in METRIC_NAMES:
            raise KeyError(category)
        return getattr(self, category)

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in METRIC_NAMES}


class CategoryImpact(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    gain: Points

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        if v not in METRIC_NAMES:
            raise ValueError(f"category must be one of {METRIC_NAMES}, got {v}")
        return v


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: str
    title: str
    action: str
    priority: Priority
    overall_gain: Points = Field(..., alias="overallGain")
    category_impacts: List[CategoryImpact] = Field(..., alias="categoryImpacts")


class EvaluationResult(BaseModel):
    """Structured hireability evaluation, exactly as the model scored it."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    grade: Grade
    overall_score: Score = Field(..., alias="overallScore")
    metrics: AuditMetrics
    summary: str
    strengths: List[str]
    weaknesses: List[str]
    recommendations: List[Recommendation]

    def to_wire(self) -> dict:
        """Serialize with the camelCase names of the response contract."""
        return self.model_dump(by_alias=True)
