import logging
import re
from typing import Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

import audit_config
from audit_errors import (
    InvalidHandle,
    ProfileNotFound,
    RateLimited,
    RepositoryFetchFailed,
    ServiceUnavailable,
)
from portfolio_audit.audit_models import GitHubProfile, RepositorySummary

github_logger = logging.getLogger("github")

_HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")
REPOSITORY_PAGE_SIZE = 100


def extract_handle(raw: Optional[str]) -> str:
    """Accept a bare handle or a profile URL and return the handle."""
    value = (raw or "").strip()
    if "/" in value:
        value = re.split(r"[?#]", value, maxsplit=1)[0]
        if value.endswith("/"):
            value = value[:-1]
        segments = [segment for segment in value.split("/") if segment]
        value = segments[-1] if segments else ""

    if value.startswith("@"):
        value = value[1:]

    if not value or not _HANDLE_PATTERN.match(value):
        raise InvalidHandle(f"not a GitHub login: {raw!r}")
    return value


class GitHubClient:
    def __init__(
        self,
        *,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.token = audit_config.GITHUB_TOKEN if token is None else token
        self.base_url = (base_url or audit_config.GITHUB_API_URL).rstrip("/")
        self.timeout = timeout or audit_config.GITHUB_TIMEOUT_SECONDS

        if not audit_config.is_credential_set(self.token):
            github_logger.warning("github_token_missing")

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if audit_config.is_credential_set(self.token):
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    # -------------------------------
    # Endpoints
    # -------------------------------
    def get_profile(self, handle: str) -> GitHubProfile:
        url = f"{self.base_url}/users/{handle}"
        try:
            response = requests.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            github_logger.error("github_profile_http_error", extra={"handle": handle, "error": str(exc)})
            raise ServiceUnavailable(str(exc)) from exc

        if response.status_code == 404:
            raise ProfileNotFound(f"no GitHub user {handle}")
        if response.status_code == 403:
            github_logger.warning("github_rate_limited", extra={"handle": handle})
            raise RateLimited(response.headers.get("X-RateLimit-Reset"))
        if not response.ok:
            github_logger.error(
                "github_profile_bad_status",
                extra={"handle": handle, "status": response.status_code},
            )
            raise ServiceUnavailable(f"status {response.status_code}")

        try:
            return GitHubProfile.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            github_logger.error("github_profile_invalid_payload", extra={"handle": handle, "error": str(exc)})
            raise ServiceUnavailable(str(exc)) from exc

    def get_repositories(self, handle: str) -> List[RepositorySummary]:
        url = f"{self.base_url}/users/{handle}/repos"
        params = {"sort": "updated", "per_page": REPOSITORY_PAGE_SIZE}
        try:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            github_logger.error("github_repos_http_error", extra={"handle": handle, "error": str(exc)})
            raise RepositoryFetchFailed(str(exc)) from exc

        if not response.ok:
            github_logger.error(
                "github_repos_bad_status",
                extra={"handle": handle, "status": response.status_code},
            )
            raise RepositoryFetchFailed(f"status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise RepositoryFetchFailed(str(exc)) from exc
        if not isinstance(payload, list):
            raise RepositoryFetchFailed(f"expected a list, got {type(payload).__name__}")

        try:
            return [RepositorySummary.model_validate(item) for item in payload]
        except ValidationError as exc:
            github_logger.error("github_repos_invalid_payload", extra={"handle": handle, "error": str(exc)})
            raise RepositoryFetchFailed(str(exc)) from exc

    def fetch_profile(self, handle: str) -> Tuple[GitHubProfile, List[RepositorySummary]]:
        """Fetch the profile, then up to 100 most recently updated repositories."""
        profile = self.get_profile(handle)
        repositories = self.get_repositories(handle)
        github_logger.info(
            "github_profile_fetched",
            extra={"handle": handle, "repositories": len(repositories)},
        )
        return profile, repositories
