"""Error taxonomy shared by the GitHub fetcher, the evaluator and the pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AuditErrorKind(str, Enum):
    """User-facing failure kinds, one per stage outcome."""

    INVALID_HANDLE = "invalid_handle"
    PROFILE_NOT_FOUND = "profile_not_found"
    RATE_LIMITED = "rate_limited"
    SERVICE_UNAVAILABLE = "service_unavailable"
    REPOSITORY_FETCH_FAILED = "repository_fetch_failed"
    MISSING_CREDENTIAL = "missing_credential"
    EVALUATION_UNAVAILABLE = "evaluation_unavailable"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_EVALUATION = "malformed_evaluation"
    # session-only: recorded when an unexpected exception aborts a search
    INTERNAL_ERROR = "internal_error"


AUDIT_FORMAT_MESSAGE = "Portfolio audit failed. The AI response was not in the expected format."
INTERNAL_ERROR_MESSAGE = "Portfolio audit failed unexpectedly. Please try again."


class AuditError(Exception):
    """Base class for every failure surfaced to the user."""

    kind: AuditErrorKind
    user_message: str

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(self.user_message)
        # internal diagnostics only; never rendered to the user
        self.detail = detail


# ------------------------------------------------------------------
# GitHub stage
# ------------------------------------------------------------------
class ProfileFetchError(AuditError):
    """Failures while reading the profile or its repositories."""


class InvalidHandle(ProfileFetchError):
    kind = AuditErrorKind.INVALID_HANDLE
    user_message = "Enter a GitHub username or profile URL."


class ProfileNotFound(ProfileFetchError):
    kind = AuditErrorKind.PROFILE_NOT_FOUND
    user_message = "This GitHub profile does not exist. Check the spelling."


class RateLimited(ProfileFetchError):
    kind = AuditErrorKind.RATE_LIMITED
    user_message = (
        "GitHub API rate limit exceeded. Please wait a few minutes or add a "
        "GitHub token (GITHUB_TOKEN) to the environment."
    )


class ServiceUnavailable(ProfileFetchError):
    kind = AuditErrorKind.SERVICE_UNAVAILABLE
    user_message = "GitHub is currently unreachable. Please try again later."


class RepositoryFetchFailed(ProfileFetchError):
    kind = AuditErrorKind.REPOSITORY_FETCH_FAILED
    user_message = "Failed to fetch user repositories from GitHub."


# ------------------------------------------------------------------
# Evaluation stage
# ------------------------------------------------------------------
class EvaluationError(AuditError):
    """Failures while obtaining or validating the model evaluation."""


class MissingCredential(EvaluationError):
    kind = AuditErrorKind.MISSING_CREDENTIAL
    user_message = "Missing OpenAI API key. Set the OPENAI_API_KEY environment variable."


class EvaluationUnavailable(EvaluationError):
    kind = AuditErrorKind.EVALUATION_UNAVAILABLE
    user_message = "The evaluation service is currently unreachable. Please try again later."


class EmptyResponse(EvaluationError):
    kind = AuditErrorKind.EMPTY_RESPONSE
    user_message = AUDIT_FORMAT_MESSAGE


class MalformedEvaluation(EvaluationError):
    kind = AuditErrorKind.MALFORMED_EVALUATION
    user_message = AUDIT_FORMAT_MESSAGE
