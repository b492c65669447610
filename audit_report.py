from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from audit_pipeline import AuditOutcome
from portfolio_audit.audit_models import METRIC_NAMES, RepositorySummary
from score_projection import project_recommendations, rubric_delta, rubric_weighted_score

TOP_LANGUAGES = 6
TOP_STARRED = 5
COMPACT_UNITS = ((1_000, "K"), (1_000_000, "M"), (1_000_000_000, "B"))


@dataclass(frozen=True)
class RepositoryStats:
    languages: Tuple[Tuple[str, int], ...]
    top_starred: Tuple[Tuple[str, int], ...]
    total_stars: int

    def to_dict(self) -> dict:
        return {
            "languages": [{"name": name, "count": count} for name, count in self.languages],
            "top_starred": [{"name": name, "stars": stars} for name, stars in self.top_starred],
            "total_stars": self.total_stars,
        }


def summarize_repositories(repositories: Sequence[RepositorySummary]) -> RepositoryStats:
    """Language distribution and most-starred projects across every fetched repository."""
    counts = Counter(repo.language for repo in repositories if repo.language)
    # Counter.most_common keeps first-seen order for ties
    languages = tuple(counts.most_common(TOP_LANGUAGES))
    starred = sorted(repositories, key=lambda repo: repo.stargazers_count, reverse=True)[:TOP_STARRED]
    return RepositoryStats(
        languages=languages,
        top_starred=tuple((repo.name, repo.stargazers_count) for repo in starred),
        total_stars=sum(repo.stargazers_count for repo in repositories),
    )


def format_compact_number(number: int) -> str:
    if abs(number) < 1000:
        return str(number)
    sign = "-" if number < 0 else ""
    for index, (divisor, suffix) in enumerate(COMPACT_UNITS):
        # tenths of the unit, rounded half up
        tenths = (abs(number) * 10 + divisor // 2) // divisor
        if tenths < 10_000 or index == len(COMPACT_UNITS) - 1:
            whole, fraction = divmod(tenths, 10)
            text = f"{whole}.{fraction}" if fraction else str(whole)
            return f"{sign}{text}{suffix}"
    return str(number)


def format_audit_report(outcome: AuditOutcome) -> str:
    """Compose the plain-text audit report for CLI output."""
    if not outcome.ok:
        return f"Analysis failed: {outcome.message}"

    result = outcome.result
    profile = outcome.profile
    lines: List[str] = []

    lines.append(f"{profile.display_name} (@{profile.login}) | {profile.location or 'Remote'}")
    lines.append(
        f"Followers: {format_compact_number(profile.followers)} | "
        f"Repos: {format_compact_number(profile.public_repos)}"
    )
    lines.append("")
    lines.append(f"Grade: {result.grade}   Score: {result.overall_score}/100")
    delta = rubric_delta(result)
    lines.append(f"Rubric-weighted score: {rubric_weighted_score(result.metrics)} ({_signed(delta)} vs model)")

    for name in METRIC_NAMES:
        lines.append(f"  {name.capitalize():<14}{result.metrics.score_for(name):>4}")

    lines.append("")
    lines.append(f'"{result.summary}"')

    _append_bullets(lines, "Key strengths", result.strengths)
    _append_bullets(lines, "Red flags", result.weaknesses)

    projections = project_recommendations(result)
    if projections:
        lines.append("")
        lines.append("Actionable roadmap:")
    for index, (rec, projection) in enumerate(zip(result.recommendations, projections), start=1):
        lines.append(
            f"{index}. [{rec.priority.upper()} PRIORITY] {rec.title} "
            f"(+{projection.overall_gain} pts, {projection.current_overall} -> {projection.projected_overall})"
        )
        lines.append(f"   {rec.action}")
        for impact in projection.impacts:
            lines.append(
                f"   - {impact.category}: {_signed(impact.gain)} "
                f"(current {impact.current} -> target {impact.target})"
            )

    stats = summarize_repositories(outcome.repositories)
    if stats.languages:
        lines.append("")
        lines.append(
            "Languages: " + ", ".join(f"{name} ({count})" for name, count in stats.languages)
        )
    if stats.top_starred:
        lines.append(
            "Top projects: " + ", ".join(f"{name} ★{stars}" for name, stars in stats.top_starred)
        )

    return "\n".join(lines)


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def _append_bullets(lines: List[str], label: str, items: Optional[Sequence[str]]) -> None:
    cleaned = [item.strip() for item in items or [] if item and item.strip()]
    if not cleaned:
        return
    lines.append("")
    lines.append(f"{label}:")
    lines.extend(f"  • {item}" for item in cleaned)
