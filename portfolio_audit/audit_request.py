# audit_request.py

from typing import Sequence

from .audit_models import EvaluationRequest, GitHubProfile, RepositoryDigest, RepositorySummary

MAX_EVALUATED_REPOSITORIES = 15


def digest_repository(repo: RepositorySummary) -> RepositoryDigest:
    return RepositoryDigest(
        name=repo.name,
        description=repo.description,
        stars=repo.stargazers_count,
        language=repo.language,
        updated=repo.updated_at,
    )


def build_request(profile: GitHubProfile, repositories: Sequence[RepositorySummary]) -> EvaluationRequest:
    """
    Build the evaluation input for one search.

    Forks are dropped and the first 15 remaining repositories are kept in the
    order GitHub returned them (most recently updated first).
    """
    owned = [repo for repo in repositories if not repo.fork]
    digests = [digest_repository(repo) for repo in owned[:MAX_EVALUATED_REPOSITORIES]]
    return EvaluationRequest(
        login=profile.login,
        bio=profile.bio,
        followers=profile.followers,
        repositories=digests,
    )
