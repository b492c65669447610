import pytest

from audit_errors import AuditErrorKind
from audit_session import (
    AuditFailed,
    AuditSession,
    AuditStatus,
    EvaluationSucceeded,
    ProfileFetched,
)
from conftest import PROFILE_PAYLOAD
from portfolio_audit.audit_models import EvaluationResult, GitHubProfile


def _profile() -> GitHubProfile:
    return GitHubProfile.model_validate(PROFILE_PAYLOAD)


def test_new_session_is_idle():
    snapshot = AuditSession().snapshot()

    assert snapshot.status == AuditStatus.IDLE
    assert snapshot.result is None
    assert not snapshot.in_flight


def test_successful_search_walks_every_status(evaluation_payload):
    session = AuditSession()
    result = EvaluationResult.model_validate(evaluation_payload)

    search_id = session.begin_search("alice")
    assert session.status == AuditStatus.FETCHING_PROFILE

    assert session.apply(search_id, ProfileFetched(_profile(), ()))
    assert session.status == AuditStatus.EVALUATING

    assert session.apply(search_id, EvaluationSucceeded(result))
    snapshot = session.snapshot()
    assert snapshot.status == AuditStatus.SUCCESS
    assert snapshot.result == result
    assert snapshot.profile.login == "alice"


def test_failure_carries_no_result():
    session = AuditSession()
    search_id = session.begin_search("ghost")

    session.apply(search_id, AuditFailed(AuditErrorKind.PROFILE_NOT_FOUND, "missing"))

    snapshot = session.snapshot()
    assert snapshot.status == AuditStatus.ERROR
    assert snapshot.result is None
    assert snapshot.error_kind == AuditErrorKind.PROFILE_NOT_FOUND
    assert snapshot.to_dict()["error"] == "profile_not_found"


def test_new_search_replaces_previous_result(evaluation_payload):
    session = AuditSession()
    first = session.begin_search("alice")
    session.apply(first, ProfileFetched(_profile(), ()))
    session.apply(first, EvaluationSucceeded(EvaluationResult.model_validate(evaluation_payload)))

    session.begin_search("bob")

    snapshot = session.snapshot()
    assert snapshot.handle == "bob"
    assert snapshot.status == AuditStatus.FETCHING_PROFILE
    assert snapshot.result is None
    assert snapshot.profile is None


def test_stale_completion_is_ignored(evaluation_payload):
    session = AuditSession()
    stale = session.begin_search("alice")
    session.apply(stale, ProfileFetched(_profile(), ()))
    current = session.begin_search("bob")

    applied = session.apply(stale, EvaluationSucceeded(EvaluationResult.model_validate(evaluation_payload)))

    assert applied is False
    snapshot = session.snapshot()
    assert snapshot.search_id == current
    assert snapshot.status == AuditStatus.FETCHING_PROFILE
    assert snapshot.result is None


def test_out_of_order_transition_is_rejected(evaluation_payload):
    session = AuditSession()
    search_id = session.begin_search("alice")

    with pytest.raises(ValueError):
        session.apply(search_id, EvaluationSucceeded(EvaluationResult.model_validate(evaluation_payload)))
