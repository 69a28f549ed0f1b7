# app/services/job_service.py
import logging
import itertools
import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

from bson import ObjectId
from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from pymongo.errors import PyMongoError

from app.config import settings
from app.models.matching import Candidate, Commitment, JobDescriptor, LandscaperMatch
from app.services import matching_service
from app.status import (
    Actor,
    JobStatus,
    is_transition_allowed,
    to_actor,
    to_job_status,
)
from app.utils import lifecycle_utils, mongo_utils
from app.utils.geo_utils import coerce_point

logger = logging.getLogger(__name__)

# statuses that occupy a landscaper's calendar
COMMITTED_STATUSES = {
    JobStatus.SCHEDULED.value,
    JobStatus.ASSIGNED.value,
    JobStatus.ACTIVE.value,
}

# newest match request per job; older in-flight requests are discarded
_match_generations: dict[str, int] = {}
_match_counter = itertools.count(1)
_match_lock = threading.Lock()


# ---------- helpers ----------
def _jobs():
    return mongo_utils.get_collection(settings.JOBS_COLLECTION)

def _landscapers():
    return mongo_utils.get_collection(settings.LANDSCAPERS_COLLECTION)

def _reviews():
    return mongo_utils.get_collection(settings.REVIEWS_COLLECTION)

def _users():
    return mongo_utils.get_collection(settings.USERS_COLLECTION)

def _assignments():
    return mongo_utils.get_collection(settings.ASSIGNMENTS_COLLECTION)

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _parse_dt(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None

def serialize_job(doc: dict) -> dict:
    data = jsonable_encoder(doc, custom_encoder={ObjectId: str})
    data["job_id"] = data.pop("_id", None)
    data["admin_bucket"] = lifecycle_utils.derive_admin_bucket(doc).value
    data["display"] = lifecycle_utils.get_status_display(doc.get("status"))
    return data

def _history_entry(prev, status: JobStatus, actor: Actor, reason: str | None = None) -> dict:
    entry = {"from": prev, "to": status.value, "actor": actor.value, "at": _now()}
    if reason:
        entry["reason"] = reason
    return entry

def _load_job(job_id: str) -> dict:
    job = _jobs().find_one({"_id": job_id})
    if not job:
        raise HTTPException(404, "Job not found")
    return job


# ---------- API: read ----------
def get_job(job_id: str) -> dict:
    return serialize_job(_load_job(job_id))


def list_jobs(bucket: str | None = None) -> list[dict]:
    if bucket is not None:
        try:
            lifecycle_utils.AdminBucket(bucket)
        except ValueError:
            raise HTTPException(400, f"Unknown bucket '{bucket}'")
    result = []
    for doc in _jobs().find({}):
        data = serialize_job(doc)
        if bucket is None or data["admin_bucket"] == bucket:
            result.append(data)
    return result


def bucket_counts() -> dict[str, int]:
    counts = {b.value: 0 for b in lifecycle_utils.AdminBucket}
    for doc in _jobs().find({}):
        counts[lifecycle_utils.derive_admin_bucket(doc).value] += 1
    return counts


# ---------- API: lifecycle writes ----------
ASSIGNMENT_FIELDS = ("landscaper_id", "assigned_to", "accepted_at")


def _apply_transition(job: dict, target: JobStatus, actor: Actor, fields: dict | None = None,
                      reason: str | None = None, unset: tuple[str, ...] = (),
                      assigned_by: Actor | None = None) -> dict:
    prev = job.get("status")
    update = {"status": target.value, "updated_at": _now()}
    if fields:
        update.update(fields)
    entry = _history_entry(prev, target, actor, reason)
    if assigned_by is not None:
        entry["assigned_by"] = assigned_by.value
    changes = {"$set": update, "$push": {"status_history": entry}}
    if unset:
        changes["$unset"] = {name: "" for name in unset}
    result = _jobs().update_one({"_id": job["_id"], "status": prev}, changes)
    if result.matched_count == 0:
        raise ValueError(f"Job {job['_id']} changed status concurrently")
    logger.info("Job %s: %s -> %s by %s", job["_id"], prev, target.value, actor.value)
    job = dict(job)
    job.update(update)
    for name in unset:
        job.pop(name, None)
    return job


def transition_job(job_id: str, to_status: str, actor: str, reason: str | None = None,
                   landscaper_id: str | None = None) -> dict:
    target = to_job_status(to_status)
    if target is None:
        raise HTTPException(400, f"Unknown status '{to_status}'")
    who = to_actor(actor)
    if who is None:
        raise HTTPException(400, f"Unknown actor '{actor}'")
    if target == JobStatus.ASSIGNED and not landscaper_id:
        raise HTTPException(400, "landscaper_id is required to assign a job")

    job = _load_job(job_id)
    prev = job.get("status")
    if not is_transition_allowed(prev, target, who):
        raise ValueError(f"Invalid status transition {prev} -> {target.value} by {who.value}")

    fields = {"is_available": target == JobStatus.AVAILABLE}
    unset: tuple[str, ...] = ()
    if target == JobStatus.ASSIGNED:
        fields.update({"landscaper_id": landscaper_id, "accepted_at": _now()})
        unset = ("assigned_to",)
    elif target in (JobStatus.AVAILABLE, JobStatus.PRICED):
        # released jobs belong to nobody
        unset = ASSIGNMENT_FIELDS
    if target == JobStatus.PRICED and not job.get("priced_at") and job.get("price") is not None:
        fields["priced_at"] = _now()
    return serialize_job(_apply_transition(job, target, who, fields, reason, unset))


def submit_completion(job_id: str, landscaper_id: str) -> dict:
    """Landscaper hands in the job; needs before and after photos on record."""
    job = _load_job(job_id)
    if job.get("status") != JobStatus.ACTIVE.value:
        raise HTTPException(400, f"Cannot complete job. Current status: {job.get('status')}")
    if landscaper_id not in (job.get("landscaper_id"), job.get("assigned_to")):
        raise HTTPException(403, "Not assigned to this job")

    photo_types = {p.get("type") for p in job.get("photos") or [] if isinstance(p, dict)}
    if not {"before", "after"} <= photo_types:
        raise HTTPException(400, "At least one before and one after photo required")

    completed = _apply_transition(
        job,
        JobStatus.COMPLETED_PENDING_REVIEW,
        Actor.LANDSCAPER,
        {"completed_at": _now()},
    )
    return serialize_job(completed)


def _assignment_edge(current, actor: Actor) -> Actor | None:
    """Table actor whose `-> assigned` edge an assignment by `actor` uses.

    Admin and system dispatchers may assign wherever the admin or the
    landscaper holds an assignment edge; the history then records that edge's
    actor, with the dispatcher kept in `assigned_by`.
    """
    if is_transition_allowed(current, JobStatus.ASSIGNED, actor):
        return actor
    if actor not in (Actor.ADMIN, Actor.SYSTEM):
        return None
    for edge_actor in (Actor.ADMIN, Actor.LANDSCAPER):
        if is_transition_allowed(current, JobStatus.ASSIGNED, edge_actor):
            return edge_actor
    return None


def auto_assign_job(job_id: str, landscaper_id: str, actor: str = Actor.ADMIN.value) -> bool:
    """Persist an assignment. Returns False instead of raising on any failure."""
    who = to_actor(actor)
    if who is None:
        logger.error("auto_assign_job: unknown actor %r for job %s", actor, job_id)
        return False
    try:
        job = _jobs().find_one({"_id": job_id})
        if not job:
            logger.error("auto_assign_job: job %s not found", job_id)
            return False
        edge_actor = _assignment_edge(job.get("status"), who)
        if edge_actor is None:
            logger.error(
                "auto_assign_job: %s may not assign job %s from status %s",
                who.value, job_id, job.get("status"),
            )
            return False

        now = _now()
        _apply_transition(
            job,
            JobStatus.ASSIGNED,
            edge_actor,
            {"landscaper_id": landscaper_id, "is_available": False, "accepted_at": now},
            unset=("assigned_to",),
            assigned_by=who,
        )
    except (PyMongoError, ValueError) as e:
        logger.error("auto_assign_job: error assigning job %s: %s", job_id, e)
        return False

    try:
        _assignments().insert_one({
            "job_id": job_id,
            "landscaper_id": landscaper_id,
            "assigned_at": now,
            "assigned_by": who.value,
            "status": JobStatus.ASSIGNED.value,
        })
    except PyMongoError as e:
        # the job itself is assigned; the audit record is best effort
        logger.warning("auto_assign_job: could not record assignment for %s: %s", job_id, e)
    return True


# ---------- API: matching ----------
def _job_window(job: dict) -> Optional[Commitment]:
    start = _parse_dt(job.get("preferred_date"))
    if start is None:
        return None
    hours = job.get("estimated_duration_hours") or settings.DEFAULT_JOB_DURATION_HOURS
    return Commitment(job_id=str(job["_id"]), start=start, end=start + timedelta(hours=float(hours)))


def _commitments_for(landscaper_id: str, exclude_job_id: str | None) -> list[Commitment]:
    commitments = []
    for job in _jobs().find({"landscaper_id": landscaper_id}):
        if job.get("_id") == exclude_job_id or job.get("status") not in COMMITTED_STATUSES:
            continue
        window = _job_window(job)
        if window is not None:
            commitments.append(window)
    return commitments


def fetch_candidates(exclude_job_id: str | None = None) -> list[Candidate]:
    """Approved landscapers with their review stars and calendar commitments."""
    candidates = []
    for doc in _landscapers().find({"approved": True}):
        landscaper_id = str(doc["_id"])
        ratings = [
            float(r["rating"]) for r in _reviews().find({"landscaper_id": landscaper_id})
            if r.get("rating") is not None
        ]
        user = _users().find_one({"_id": doc.get("user_id")}) if doc.get("user_id") else None
        user = user or {}
        area = coerce_point(doc.get("service_area"))
        candidates.append(Candidate(
            id=landscaper_id,
            name=doc.get("business_name") or user.get("full_name") or "Landscaper",
            email=user.get("email") or "",
            phone=user.get("phone") or "",
            specialties=doc.get("specialties") or [],
            service_area={"lat": area[0], "lng": area[1]} if area else None,
            ratings=ratings,
            avg_response_time_hours=doc.get("avg_response_time_hours"),
            available=bool(doc.get("available")),
            commitments=_commitments_for(landscaper_id, exclude_job_id),
        ))
    return candidates


def build_descriptor(job: dict) -> JobDescriptor:
    point = coerce_point(job.get("location"))
    return JobDescriptor(
        job_id=str(job["_id"]),
        client_location={"lat": point[0], "lng": point[1]} if point else None,
        service_type=job.get("service_type") or "",
        urgency=job.get("urgency") if job.get("urgency") in ("low", "medium", "high") else None,
    )


def _begin_match(job_id: str) -> int:
    with _match_lock:
        generation = next(_match_counter)
        _match_generations[job_id] = generation
        return generation


def _is_current(job_id: str, generation: int) -> bool:
    with _match_lock:
        return _match_generations.get(job_id) == generation


def _end_match(job_id: str, generation: int) -> None:
    with _match_lock:
        if _match_generations.get(job_id) == generation:
            del _match_generations[job_id]


def match_job(
    job_id: str,
    limit: int | None = None,
    proposed_date: datetime | None = None,
    estimated_duration_hours: float | None = None,
) -> Optional[list[LandscaperMatch]]:
    """Rank candidates for a stored job.

    Returns None when a newer match request for the same job started while
    this one was running; its result would be stale.
    """
    job = _load_job(job_id)
    generation = _begin_match(job_id)
    try:
        if proposed_date is None:
            proposed_date = _parse_dt(job.get("preferred_date"))
        if estimated_duration_hours is None:
            estimated_duration_hours = job.get("estimated_duration_hours")

        descriptor = build_descriptor(job)
        candidates = fetch_candidates(exclude_job_id=job_id)
        matches = matching_service.find_best_matches(
            descriptor, candidates, limit, proposed_date, estimated_duration_hours
        )
        if not _is_current(job_id, generation):
            logger.info("Discarding superseded match request for job %s", job_id)
            return None
        return matches
    finally:
        _end_match(job_id, generation)
