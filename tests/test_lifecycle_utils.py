import pytest

from app.status import JobStatus
from app.utils import lifecycle_utils
from app.utils.lifecycle_utils import AdminBucket, derive_admin_bucket


@pytest.mark.parametrize("status", list(JobStatus))
def test_every_status_maps_to_one_bucket(status):
    assert derive_admin_bucket({"status": status.value}) in set(AdminBucket)


def test_status_wins_over_columns():
    job = {"status": "pending", "completed_at": "2024-05-01T10:00:00Z", "landscaper_id": "l1"}
    assert derive_admin_bucket(job) is AdminBucket.NEEDS_PRICING


@pytest.mark.parametrize("job,bucket", [
    ({"status": None, "completed_at": "2024-05-01T10:00:00Z"}, AdminBucket.COMPLETED),
    ({"status": "in_progress", "assigned_to": "u1"}, AdminBucket.ACTIVE),
    ({"landscaper_id": "l1", "price": 120}, AdminBucket.ACTIVE),
    ({"price": 120, "priced_at": "2024-05-01"}, AdminBucket.READY_TO_RELEASE),
    ({"price": 120}, AdminBucket.NEEDS_PRICING),
    ({"status": "legacy"}, AdminBucket.NEEDS_PRICING),
])
def test_column_fallback(job, bucket):
    assert derive_admin_bucket(job) is bucket


def test_bucket_accepts_objects_and_none():
    class Row:
        status = "completed"
    assert derive_admin_bucket(Row()) is AdminBucket.COMPLETED
    assert derive_admin_bucket(None) is AdminBucket.NEEDS_PRICING


def test_status_display_fallbacks():
    assert lifecycle_utils.get_status_display("active")["label"] == "Active"
    assert lifecycle_utils.get_status_display(None)["label"] == "Pending"
    unknown = lifecycle_utils.get_status_display("awaiting_parts_delivery")
    assert unknown["label"] == "awaiting parts delivery"
    assert unknown["color"] == "gray"


def test_role_labels():
    assert lifecycle_utils.get_status_label("available", "client") == "Finding Landscaper"
    assert lifecycle_utils.get_status_label("available", "admin") == "Available"
    assert lifecycle_utils.get_status_label("on_hold", "client") == "on hold"
    for table in (lifecycle_utils.JOB_STATUS_LABELS, lifecycle_utils.CLIENT_STATUS_LABELS):
        assert set(table) == set(JobStatus)


def test_landscaper_actions():
    assert lifecycle_utils.can_landscaper("can_accept", "scheduled")
    assert lifecycle_utils.can_landscaper("can_start", "assigned")
    assert not lifecycle_utils.can_landscaper("can_complete", "assigned")
    assert not lifecycle_utils.can_landscaper("can_fly", "active")
    assert not lifecycle_utils.can_landscaper("can_message", "whatever")


def test_client_stage_and_step_index():
    assert lifecycle_utils.derive_client_stage("pending") == "under_review"
    assert lifecycle_utils.derive_client_stage("priced") == "estimate_ready"
    assert lifecycle_utils.derive_client_stage("completed_pending_review") == "active"
    assert lifecycle_utils.derive_client_stage(None) == "under_review"
    assert lifecycle_utils.derive_client_step_index("cancelled") == -1
    assert lifecycle_utils.derive_client_step_index("completed") == 4
    assert lifecycle_utils.derive_client_step_index("assigned") == 2
