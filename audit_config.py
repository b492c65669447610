# audit_config.py
"""
Configuration for the portfolio audit pipeline.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Evaluation model
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-5.1")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60"))

# GitHub
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN", "")
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_TIMEOUT_SECONDS = float(os.getenv("GITHUB_TIMEOUT_SECONDS", "10"))

# Validation
for _name, _value in (
    ("OPENAI_TIMEOUT_SECONDS", OPENAI_TIMEOUT_SECONDS),
    ("GITHUB_TIMEOUT_SECONDS", GITHUB_TIMEOUT_SECONDS),
):
    if _value <= 0:
        raise ValueError(f"{_name} must be a positive number of seconds, got {_value}")

# Values that deployment dashboards write when a variable is declared but unset
_PLACEHOLDER_CREDENTIALS = {"", "undefined", "null"}


def is_credential_set(value) -> bool:
    """Check if a credential holds a usable value."""
    if value is None:
        return False
    return value.strip() not in _PLACEHOLDER_CREDENTIALS
