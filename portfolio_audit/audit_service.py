# audit_service.py

import json
import logging
from typing import Optional

import openai
from openai import OpenAI
from pydantic import ValidationError

import audit_config
from audit_errors import EmptyResponse, EvaluationUnavailable, MalformedEvaluation, MissingCredential

from .audit_models import EvaluationRequest, EvaluationResult
from .audit_prompt import RESPONSE_FORMAT, RUBRIC_VERSION, build_prompt

logger = logging.getLogger(__name__)


def parse_evaluation(raw: Optional[str]) -> EvaluationResult:
    """Parse model output into an EvaluationResult. Nothing is coerced or partially accepted."""
    text = (raw or "").strip()
    if not text:
        raise EmptyResponse("model returned no content")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("portfolio_audit_invalid_json", extra={"error": str(exc), "raw_output": text[:2000]})
        raise MalformedEvaluation(f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        logger.error("portfolio_audit_not_an_object", extra={"raw_output": text[:2000]})
        raise MalformedEvaluation(f"expected a JSON object, got {type(data).__name__}")

    try:
        return EvaluationResult.model_validate(data)
    except ValidationError as exc:
        logger.error(
            "portfolio_audit_contract_violation",
            extra={"error_count": exc.error_count(), "error": str(exc)},
        )
        raise MalformedEvaluation(str(exc)) from exc


def _response_text(response) -> Optional[str]:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    return getattr(choices[0].message, "content", None)


class PortfolioAuditService:

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = audit_config.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or audit_config.OPENAI_MODEL
        self.timeout = timeout or audit_config.OPENAI_TIMEOUT_SECONDS
        self._client = client

    def ensure_credentials(self) -> None:
        if not audit_config.is_credential_set(self.api_key):
            raise MissingCredential("OPENAI_API_KEY is not configured")

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def evaluate(self, request: EvaluationRequest) -> EvaluationResult:
        self.ensure_credentials()
        prompt = build_prompt(request)

        logger.info(
            "portfolio_audit_requested",
            extra={
                "login": request.login,
                "repositories": len(request.repositories),
                "model": self.model,
                "rubric_version": RUBRIC_VERSION,
            },
        )

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.1,
                response_format=RESPONSE_FORMAT,
            )
        except openai.APIError as exc:
            logger.error("portfolio_audit_request_failed", extra={"login": request.login, "error": str(exc)})
            raise EvaluationUnavailable(str(exc)) from exc

        result = parse_evaluation(_response_text(response))
        logger.info(
            "portfolio_audit_completed",
            extra={"login": request.login, "grade": result.grade, "overall_score": result.overall_score},
        )
        return result
