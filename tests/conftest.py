import copy
import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Optional
from unittest.mock import MagicMock

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


EVALUATION_PAYLOAD = {
    "grade": "B",
    "overallScore": 72,
    "metrics": {
        "documentation": 60,
        "activity": 80,
        "organization": 70,
        "engagement": 50,
        "depth": 90,
        "impact": 40,
    },
    "summary": "Solid backend engineer with thin documentation.",
    "strengths": ["Consistent commit history", "Broad language coverage"],
    "weaknesses": ["Sparse READMEs"],
    "recommendations": [
        {
            "category": "Documentation",
            "title": "Write setup guides",
            "action": "Add install and usage sections to the top 3 repositories.",
            "priority": "High",
            "overallGain": 6,
            "categoryImpacts": [
                {"category": "documentation", "gain": 20},
                {"category": "organization", "gain": 5},
            ],
        },
        {
            "category": "Depth",
            "title": "Ship a flagship project",
            "action": "Polish one complex project end to end.",
            "priority": "Medium",
            "overallGain": 40,
            "categoryImpacts": [{"category": "depth", "gain": 15}],
        },
        {
            "category": "Engagement",
            "title": "Share your work",
            "action": "Post a write-up for your most starred repository.",
            "priority": "Low",
            "overallGain": 3,
            "categoryImpacts": [{"category": "engagement", "gain": 8}],
        },
    ],
}

PROFILE_PAYLOAD = {
    "login": "alice",
    "name": "Alice Liddell",
    "avatar_url": "https://avatars.example/alice.png",
    "html_url": "https://github.com/alice",
    "bio": "Backend engineer",
    "location": "Berlin",
    "public_repos": 3,
    "followers": 1500,
    "following": 12,
    "created_at": "2015-04-01T10:00:00Z",
    "site_admin": False,
}


def make_repo_payload(name: str, *, fork: bool = False, stars: int = 0, language: Optional[str] = "Python") -> dict:
    return {
        "name": name,
        "description": f"{name} description",
        "language": language,
        "stargazers_count": stars,
        "forks_count": 0,
        "updated_at": "2026-09-01T00:00:00Z",
        "html_url": f"https://github.com/alice/{name}",
        "fork": fork,
    }


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, headers=None, invalid_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self._invalid_json = invalid_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeGitHubAPI:
    """Stand-in for requests.get that records every call."""

    def __init__(self, profile: FakeResponse, repos: Optional[FakeResponse] = None):
        self.profile = profile
        self.repos = repos or FakeResponse(200, [])
        self.calls = []

    def __call__(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        if url.endswith("/repos"):
            return self.repos
        return self.profile


def make_completion(content: Optional[str]):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_openai_client(content: Optional[str]) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion(content)
    return client


@pytest.fixture()
def evaluation_payload() -> dict:
    return copy.deepcopy(EVALUATION_PAYLOAD)


@pytest.fixture()
def evaluation_json(evaluation_payload) -> str:
    return json.dumps(evaluation_payload)


@pytest.fixture()
def profile_payload() -> dict:
    return dict(PROFILE_PAYLOAD)
