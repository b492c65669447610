import pytest

from audit_errors import RateLimited
from audit_pipeline import AuditOutcome
from audit_report import format_audit_report, format_compact_number, summarize_repositories
from conftest import PROFILE_PAYLOAD, make_repo_payload
from portfolio_audit.audit_models import EvaluationResult, GitHubProfile, RepositorySummary


def _repos():
    payloads = [
        make_repo_payload("api", stars=120, language="Python"),
        make_repo_payload("web", stars=40, language="TypeScript"),
        make_repo_payload("cli", stars=300, language="Python"),
        make_repo_payload("notes", stars=0, language=None),
        make_repo_payload("infra", stars=7, language="Go"),
        make_repo_payload("tool", stars=9, language="Python"),
        make_repo_payload("fork", stars=1000, language="Rust", fork=True),
    ]
    return [RepositorySummary.model_validate(p) for p in payloads]


def _success(evaluation_payload, **profile_overrides) -> AuditOutcome:
    profile = GitHubProfile.model_validate({**PROFILE_PAYLOAD, **profile_overrides})
    result = EvaluationResult.model_validate(evaluation_payload)
    return AuditOutcome.success(result, profile, tuple(_repos()))


def test_summarize_repositories_counts_languages_and_stars():
    stats = summarize_repositories(_repos())

    assert stats.languages[0] == ("Python", 3)
    assert ("Rust", 1) in stats.languages
    assert all(name for name, _ in stats.languages)
    assert [name for name, _ in stats.top_starred] == ["fork", "cli", "api", "web", "tool"]
    assert stats.total_stars == 1476


def test_summarize_repositories_empty():
    stats = summarize_repositories([])

    assert stats.to_dict() == {"languages": [], "top_starred": [], "total_stars": 0}


def test_format_compact_number():
    assert format_compact_number(999) == "999"
    assert format_compact_number(1500) == "1.5K"
    assert format_compact_number(2_000_000) == "2M"
    assert format_compact_number(1_250_000) == "1.3M"


@pytest.mark.parametrize(
    "number, expected",
    [(999_950, "1M"), (999_949, "999.9K"), (999_950_000, "1B"), (1_999_999, "2M")],
)
def test_format_compact_number_carries_into_next_unit(number, expected):
    assert format_compact_number(number) == expected


def test_format_audit_report_success(evaluation_payload):
    text = format_audit_report(_success(evaluation_payload))

    assert "Alice Liddell (@alice) | Berlin" in text
    assert "Followers: 1.5K | Repos: 3" in text
    assert "Grade: B   Score: 72/100" in text
    assert "Rubric-weighted score: 66 (+6 vs model)" in text
    assert "Key strengths:" in text
    assert "  • Sparse READMEs" in text
    assert "1. [HIGH PRIORITY] Write setup guides (+6 pts, 72 -> 78)" in text
    assert "   - documentation: +20 (current 60 -> target 80)" in text
    assert "   - depth: +15 (current 90 -> target 100)" in text
    assert "Languages: Python (3)" in text


def test_format_audit_report_defaults_location_and_skips_empty_sections(evaluation_payload):
    evaluation_payload["weaknesses"] = []
    text = format_audit_report(_success(evaluation_payload, location=None))

    assert "(@alice) | Remote" in text
    assert "Red flags" not in text


def test_format_audit_report_error():
    outcome = AuditOutcome.failure(RateLimited())

    text = format_audit_report(outcome)

    assert text.startswith("Analysis failed: GitHub API rate limit exceeded.")
