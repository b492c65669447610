from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

from audit_errors import INTERNAL_ERROR_MESSAGE, AuditError, AuditErrorKind
from audit_session import AuditFailed, AuditSession, EvaluationSucceeded, ProfileFetched
from github_service import GitHubClient, extract_handle
from portfolio_audit.audit_models import EvaluationResult, GitHubProfile, RepositorySummary
from portfolio_audit.audit_request import build_request
from portfolio_audit.audit_service import PortfolioAuditService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditOutcome:
    """Either a complete, validated evaluation or a single error kind. Never both."""

    kind: Literal["success", "error"]
    result: Optional[EvaluationResult] = None
    profile: Optional[GitHubProfile] = None
    repositories: Tuple[RepositorySummary, ...] = field(default_factory=tuple)
    error_kind: Optional[AuditErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind == "success"

    @classmethod
    def success(
        cls,
        result: EvaluationResult,
        profile: GitHubProfile,
        repositories: Tuple[RepositorySummary, ...],
    ) -> "AuditOutcome":
        return cls(kind="success", result=result, profile=profile, repositories=tuple(repositories))

    @classmethod
    def failure(cls, error: AuditError) -> "AuditOutcome":
        return cls(kind="error", error_kind=error.kind, message=error.user_message)


def run_evaluation(
    raw_handle_or_url: str,
    *,
    github_client: Optional[GitHubClient] = None,
    audit_service: Optional[PortfolioAuditService] = None,
    session: Optional[AuditSession] = None,
) -> AuditOutcome:
    """Fetch a GitHub profile, have the model grade it, and return the outcome."""
    audit_service = audit_service or PortfolioAuditService()
    search_id = session.begin_search((raw_handle_or_url or "").strip()) if session else None

    try:
        # fail fast: no GitHub traffic without an evaluation credential
        audit_service.ensure_credentials()
        handle = extract_handle(raw_handle_or_url)

        github_client = github_client or GitHubClient()
        profile, repositories = github_client.fetch_profile(handle)
        if session and not session.apply(search_id, ProfileFetched(profile, tuple(repositories))):
            logger.info("audit_superseded", extra={"handle": handle, "stage": "fetch"})

        request = build_request(profile, repositories)
        result = audit_service.evaluate(request)
    except AuditError as exc:
        logger.warning(
            "audit_failed",
            extra={"error_kind": exc.kind.value, "detail": exc.detail},
        )
        outcome = AuditOutcome.failure(exc)
        if session:
            session.apply(search_id, AuditFailed(outcome.error_kind, outcome.message))
        return outcome
    except Exception:
        logger.exception("audit_crashed", extra={"raw_input": raw_handle_or_url})
        if session:
            session.apply(search_id, AuditFailed(AuditErrorKind.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE))
        raise

    if session:
        session.apply(search_id, EvaluationSucceeded(result))
    return AuditOutcome.success(result, profile, tuple(repositories))
