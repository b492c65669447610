# main.py

from dotenv import load_dotenv
load_dotenv()

import logging
import time
import uuid
from dataclasses import asdict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from audit_errors import AuditErrorKind
from audit_pipeline import run_evaluation
from audit_report import summarize_repositories
from audit_session import AuditSession
from github_service import GitHubClient
from portfolio_audit.audit_service import PortfolioAuditService
from score_projection import project_recommendations, rubric_weighted_score


# Request Logging Middleware
request_logger = logging.getLogger("request_logging")

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        start_time = time.time()

        response = await call_next(request)

        latency_ms = (time.time() - start_time) * 1000

        request_logger.info(
            "request_completed",
            extra={
                "request_id": request_id,
                "endpoint": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 2),
            }
        )

        return response


app = FastAPI()
app.add_middleware(RequestLoggingMiddleware)
app.state.audit_session = AuditSession()


ERROR_STATUS_CODES = {
    AuditErrorKind.INVALID_HANDLE: 400,
    AuditErrorKind.PROFILE_NOT_FOUND: 404,
    AuditErrorKind.RATE_LIMITED: 429,
    AuditErrorKind.SERVICE_UNAVAILABLE: 502,
    AuditErrorKind.REPOSITORY_FETCH_FAILED: 502,
    AuditErrorKind.MISSING_CREDENTIAL: 500,
    AuditErrorKind.EVALUATION_UNAVAILABLE: 503,
    AuditErrorKind.EMPTY_RESPONSE: 502,
    AuditErrorKind.MALFORMED_EVALUATION: 502,
    AuditErrorKind.INTERNAL_ERROR: 500,
}


class AuditRequest(BaseModel):
    profile: str


def get_github_client() -> GitHubClient:
    return GitHubClient()


def get_audit_service() -> PortfolioAuditService:
    return PortfolioAuditService()


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
def _healthy_response():
    return {"status": "ok"}


@app.get("/health")
def health():
    return _healthy_response()


@app.get("/healthz")
def healthz():
    return _healthy_response()


# ------------------------------------------------------------------
# Portfolio audit
# ------------------------------------------------------------------
@app.post("/audit")
def audit_profile(body: AuditRequest):
    outcome = run_evaluation(
        body.profile,
        github_client=get_github_client(),
        audit_service=get_audit_service(),
        session=app.state.audit_session,
    )

    if not outcome.ok:
        return JSONResponse(
            status_code=ERROR_STATUS_CODES.get(outcome.error_kind, 500),
            content={"error": outcome.error_kind.value, "message": outcome.message},
        )

    projections = project_recommendations(outcome.result)
    return {
        "profile": outcome.profile.model_dump(),
        "evaluation": outcome.result.to_wire(),
        "rubric_weighted_score": rubric_weighted_score(outcome.result.metrics),
        "projections": [
            {
                "title": projection.title,
                "priority": projection.priority,
                "overall_gain": projection.overall_gain,
                "current_overall": projection.current_overall,
                "projected_overall": projection.projected_overall,
                "impacts": [asdict(impact) for impact in projection.impacts],
            }
            for projection in projections
        ],
        "repository_stats": summarize_repositories(outcome.repositories).to_dict(),
    }


@app.get("/audit/session")
def audit_session_state():
    return app.state.audit_session.snapshot().to_dict()
