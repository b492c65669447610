"""Per-session state for interactive audits: one status machine, newest search wins."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Optional, Tuple, Union

from audit_errors import AuditErrorKind
from portfolio_audit.audit_models import EvaluationResult, GitHubProfile, RepositorySummary

logger = logging.getLogger(__name__)


class AuditStatus(str, Enum):
    IDLE = "IDLE"
    FETCHING_PROFILE = "FETCHING_PROFILE"
    EVALUATING = "EVALUATING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ProfileFetched:
    profile: GitHubProfile
    repositories: Tuple[RepositorySummary, ...]


@dataclass(frozen=True)
class EvaluationSucceeded:
    result: EvaluationResult


@dataclass(frozen=True)
class AuditFailed:
    error_kind: AuditErrorKind
    message: str


AuditEvent = Union[ProfileFetched, EvaluationSucceeded, AuditFailed]

# status an event may arrive in -> status it moves to
_TRANSITIONS = {
    ProfileFetched: ({AuditStatus.FETCHING_PROFILE}, AuditStatus.EVALUATING),
    EvaluationSucceeded: ({AuditStatus.EVALUATING}, AuditStatus.SUCCESS),
    AuditFailed: ({AuditStatus.FETCHING_PROFILE, AuditStatus.EVALUATING}, AuditStatus.ERROR),
}


@dataclass(frozen=True)
class SessionSnapshot:
    search_id: int
    handle: Optional[str]
    status: AuditStatus
    profile: Optional[GitHubProfile] = None
    repositories: Tuple[RepositorySummary, ...] = field(default_factory=tuple)
    result: Optional[EvaluationResult] = None
    error_kind: Optional[AuditErrorKind] = None
    error_message: Optional[str] = None

    @property
    def in_flight(self) -> bool:
        return self.status in (AuditStatus.FETCHING_PROFILE, AuditStatus.EVALUATING)

    def to_dict(self) -> dict:
        return {
            "search_id": self.search_id,
            "handle": self.handle,
            "status": self.status.value,
            "profile": self.profile.model_dump() if self.profile else None,
            "repository_count": len(self.repositories),
            "result": self.result.to_wire() if self.result else None,
            "error": self.error_kind.value if self.error_kind else None,
            "message": self.error_message,
        }


class AuditSession:
    """State owned by one user session. A new search replaces everything from the last one."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._snapshot = SessionSnapshot(search_id=0, handle=None, status=AuditStatus.IDLE)

    def begin_search(self, handle: str) -> int:
        with self._lock:
            search_id = self._snapshot.search_id + 1
            self._snapshot = SessionSnapshot(
                search_id=search_id,
                handle=handle,
                status=AuditStatus.FETCHING_PROFILE,
            )
        logger.info("audit_search_started", extra={"search_id": search_id, "handle": handle})
        return search_id

    def apply(self, search_id: int, event: AuditEvent) -> bool:
        """Apply a stage completion. Returns False when the search has been superseded."""
        with self._lock:
            current = self._snapshot
            if search_id != current.search_id:
                logger.info(
                    "audit_stale_event_dropped",
                    extra={"search_id": search_id, "current_search_id": current.search_id},
                )
                return False

            allowed_from, next_status = _TRANSITIONS[type(event)]
            if current.status not in allowed_from:
                raise ValueError(
                    f"cannot apply {type(event).__name__} while {current.status.value}"
                )

            self._snapshot = _next_snapshot(current, next_status, event)
            return True

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot

    @property
    def status(self) -> AuditStatus:
        return self.snapshot().status


def _next_snapshot(current: SessionSnapshot, status: AuditStatus, event: AuditEvent) -> SessionSnapshot:
    if isinstance(event, ProfileFetched):
        return SessionSnapshot(
            search_id=current.search_id,
            handle=current.handle,
            status=status,
            profile=event.profile,
            repositories=tuple(event.repositories),
        )
    if isinstance(event, EvaluationSucceeded):
        return SessionSnapshot(
            search_id=current.search_id,
            handle=current.handle,
            status=status,
            profile=current.profile,
            repositories=current.repositories,
            result=event.result,
        )
    # failures never keep a partial result
    return SessionSnapshot(
        search_id=current.search_id,
        handle=current.handle,
        status=status,
        profile=current.profile,
        repositories=current.repositories,
        error_kind=event.error_kind,
        error_message=event.message,
    )
