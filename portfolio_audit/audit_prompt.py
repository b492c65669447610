import json
from typing import Dict

from .audit_models import GRADES, METRIC_NAMES, PRIORITIES, EvaluationRequest

RUBRIC_VERSION = "v1.0"

# Percent weights, in the order they appear in the prompt. Must sum to 100.
RUBRIC_WEIGHTS: Dict[str, int] = {
    "documentation": 25,
    "activity": 20,
    "organization": 15,
    "engagement": 15,
    "depth": 15,
    "impact": 10,
}

AUDIT_PROMPT_TEMPLATE = """
Act as a FAANG Senior Technical Recruiter. Analyze this GitHub profile for "{login}".

Data:
Bio: {bio}
Followers: {followers}
Repos: {repos}

Scoring Weights (Strict):
- Documentation: 25% (README presence, quality, setup guides)
- Activity: 20% (Recency, consistency of commits)
- Organization: 15% (Topic tags, licenses, clean repo naming)
- Engagement: 15% (Stars, forks, social proof)
- Depth: 15% (Tech stack variety, project complexity)
- Impact: 10% (Utility of tools, popularity, unique value)

Task:
1. Calculate current scores (0-100) for all 6 metrics.
2. Identify 3 critical recommendations.
3. For EACH recommendation, calculate exactly how many points it adds to its primary categories and the resulting gain in the overall 0-100 score.

Rules:
- Every score and gain is a whole number.
- categoryImpacts[].category MUST be one of: {metric_names}.
- Return only the JSON object described by the response schema.
"""


def build_prompt(request: EvaluationRequest) -> str:
    repos = [repo.model_dump() for repo in request.repositories]
    return AUDIT_PROMPT_TEMPLATE.format(
        login=request.login,
        bio=request.bio or "None",
        followers=request.followers,
        repos=json.dumps(repos, ensure_ascii=False),
        metric_names=", ".join(METRIC_NAMES),
    )


_NUMBER = {"type": "number"}
_STRING = {"type": "string"}
_STRING_LIST = {"type": "array", "items": _STRING}

EVALUATION_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "grade": {"type": "string", "enum": list(GRADES)},
        "overallScore": _NUMBER,
        "metrics": {
            "type": "object",
            "properties": {name: _NUMBER for name in METRIC_NAMES},
            "required": list(METRIC_NAMES),
            "additionalProperties": False,
        },
        "summary": _STRING,
        "strengths": _STRING_LIST,
        "weaknesses": _STRING_LIST,
        "recommendations": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "category": _STRING,
                    "title": _STRING,
                    "action": _STRING,
                    "priority": {"type": "string", "enum": list(PRIORITIES)},
                    "overallGain": _NUMBER,
                    "categoryImpacts": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "category": {"type": "string", "enum": list(METRIC_NAMES)},
                                "gain": _NUMBER,
                            },
                            "required": ["category", "gain"],
                            "additionalProperties": False,
                        },
                    },
                },
                "required": ["category", "title", "action", "priority", "overallGain", "categoryImpacts"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["grade", "overallScore", "metrics", "summary", "strengths", "weaknesses", "recommendations"],
    "additionalProperties": False,
}

RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "portfolio_evaluation",
        "strict": True,
        "schema": EVALUATION_RESPONSE_SCHEMA,
    },
}
