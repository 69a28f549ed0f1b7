import pytest

from app.status import (
    ALLOWED_TRANSITIONS,
    Actor,
    JobStatus,
    allowed_transitions,
    is_terminal,
    is_transition_allowed,
    to_job_status,
)
from app.utils.lifecycle_utils import STATUS_TO_ADMIN_BUCKET


EXPECTED_EDGES = {
    ("pending", "quoted", "system"),
    ("pending", "priced", "admin"),
    ("pending", "cancelled", "admin"),
    ("pending", "cancelled", "client"),
    ("quoted", "priced", "admin"),
    ("quoted", "cancelled", "admin"),
    ("quoted", "cancelled", "client"),
    ("priced", "available", "admin"),
    ("priced", "assigned", "admin"),
    ("priced", "cancelled", "admin"),
    ("available", "assigned", "landscaper"),
    ("available", "priced", "admin"),
    ("available", "cancelled", "admin"),
    ("scheduled", "assigned", "landscaper"),
    ("scheduled", "available", "admin"),
    ("scheduled", "rescheduled", "admin"),
    ("scheduled", "cancelled", "admin"),
    ("assigned", "active", "landscaper"),
    ("assigned", "active", "system"),
    ("assigned", "available", "admin"),
    ("assigned", "blocked", "landscaper"),
    ("assigned", "cancelled", "admin"),
    ("active", "completed_pending_review", "landscaper"),
    ("active", "completed_pending_review", "system"),
    ("active", "blocked", "landscaper"),
    ("active", "flagged_review", "admin"),
    ("active", "cancelled", "admin"),
    ("pending_review", "completed", "admin"),
    ("pending_review", "active", "admin"),
    ("pending_review", "flagged_review", "admin"),
    ("completed_pending_review", "completed", "admin"),
    ("completed_pending_review", "active", "admin"),
    ("completed_pending_review", "completion_flagged", "admin"),
    ("completed_pending_review", "flagged_review", "admin"),
    ("completed", "flagged_review", "admin"),
    ("completion_flagged", "active", "admin"),
    ("completion_flagged", "completed", "admin"),
    ("completion_flagged", "cancelled", "admin"),
    ("flagged_review", "active", "admin"),
    ("flagged_review", "completed", "admin"),
    ("flagged_review", "cancelled", "admin"),
    ("blocked", "assigned", "admin"),
    ("blocked", "available", "admin"),
    ("blocked", "rescheduled", "admin"),
    ("blocked", "cancelled", "admin"),
    ("rescheduled", "available", "admin"),
    ("rescheduled", "assigned", "admin"),
    ("rescheduled", "cancelled", "admin"),
}


def test_table_matches_contract_exactly():
    edges = {
        (src.value, t.to.value, t.actor.value)
        for src, entries in ALLOWED_TRANSITIONS.items()
        for t in entries
    }
    assert edges == EXPECTED_EDGES


def test_every_status_has_transition_list_and_bucket():
    assert set(ALLOWED_TRANSITIONS) == set(JobStatus)
    assert set(STATUS_TO_ADMIN_BUCKET) == set(JobStatus)
    assert len(JobStatus) == 15


def test_unlisted_pairs_are_rejected():
    for src in JobStatus:
        for dst in JobStatus:
            for actor in Actor:
                expected = (src.value, dst.value, actor.value) in EXPECTED_EDGES
                assert is_transition_allowed(src, dst, actor) is expected


def test_cancelled_is_terminal():
    assert is_terminal(JobStatus.CANCELLED)
    assert not is_terminal(JobStatus.COMPLETED)
    for dst in JobStatus:
        for actor in Actor:
            assert not is_transition_allowed("cancelled", dst.value, actor.value)


def test_assigned_to_active_depends_on_actor():
    assert is_transition_allowed("assigned", "active", "landscaper")
    assert not is_transition_allowed("assigned", "active", "client")


def test_completed_can_only_be_flagged():
    assert is_transition_allowed("completed", "flagged_review", "admin")
    assert not is_transition_allowed("completed", "active", "admin")


@pytest.mark.parametrize("src,dst,actor", [
    (None, "active", "admin"),
    ("legacy_status", "active", "admin"),
    ("assigned", None, "landscaper"),
    ("assigned", "active", "robot"),
    (42, ["active"], {"admin": 1}),
])
def test_malformed_input_is_not_allowed(src, dst, actor):
    assert is_transition_allowed(src, dst, actor) is False


def test_allowed_transitions_filters_by_actor():
    targets = [t.to for t in allowed_transitions("active", "landscaper")]
    assert targets == [JobStatus.COMPLETED_PENDING_REVIEW, JobStatus.BLOCKED]
    assert allowed_transitions("nope") == []
    assert allowed_transitions("active", "robot") == []


def test_to_job_status():
    assert to_job_status("blocked") is JobStatus.BLOCKED
    assert to_job_status(JobStatus.ACTIVE) is JobStatus.ACTIVE
    assert to_job_status("in_progress") is None
    assert to_job_status(None) is None
