"""Utility helpers to turn model-estimated gains into displayable score projections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from portfolio_audit.audit_models import AuditMetrics, CategoryImpact, EvaluationResult, Recommendation
from portfolio_audit.audit_prompt import RUBRIC_WEIGHTS

MAX_SCORE = 100


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def project_score(current: int, gain: int) -> int:
    """Score shown after applying a gain. Only the projection is clamped, never the gain."""
    return int(_clamp(current + gain, 0, MAX_SCORE))


@dataclass(frozen=True)
class ImpactProjection:
    category: str
    current: int
    gain: int
    target: int


@dataclass(frozen=True)
class RecommendationProjection:
    title: str
    priority: str
    overall_gain: int
    current_overall: int
    projected_overall: int
    impacts: Tuple[ImpactProjection, ...]


def project_impact(metrics: AuditMetrics, impact: CategoryImpact) -> ImpactProjection:
    current = metrics.score_for(impact.category)
    return ImpactProjection(
        category=impact.category,
        current=current,
        gain=impact.gain,
        target=project_score(current, impact.gain),
    )


def project_recommendation(result: EvaluationResult, recommendation: Recommendation) -> RecommendationProjection:
    return RecommendationProjection(
        title=recommendation.title,
        priority=recommendation.priority,
        overall_gain=recommendation.overall_gain,
        current_overall=result.overall_score,
        projected_overall=project_score(result.overall_score, recommendation.overall_gain),
        impacts=tuple(project_impact(result.metrics, impact) for impact in recommendation.category_impacts),
    )


def project_recommendations(result: EvaluationResult) -> List[RecommendationProjection]:
    return [project_recommendation(result, rec) for rec in result.recommendations]


def rubric_weighted_score(metrics: AuditMetrics) -> int:
    """Weighted sum of the six metrics using the prompt's rubric weights."""
    total = sum(metrics.score_for(name) * weight for name, weight in RUBRIC_WEIGHTS.items())
    return int(round(total / sum(RUBRIC_WEIGHTS.values())))


def rubric_delta(result: EvaluationResult) -> int:
    """How far the model's overall score sits from the rubric-weighted metrics."""
    return result.overall_score - rubric_weighted_score(result.metrics)
