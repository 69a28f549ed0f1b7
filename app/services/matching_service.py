# app/services/matching_service.py
"""Landscaper matching scorer.

Pure functions over already fetched candidates: nothing here touches the
database. Each candidate gets a 0-100 score built from proximity, specialty,
rating, responsiveness and availability, minus a penalty when the proposed
visit overlaps one of its existing commitments. Conflicted candidates are
flagged but kept in the ranking so the admin makes the final call.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from app.config import settings
from app.models.matching import Candidate, Commitment, JobDescriptor, LandscaperMatch
from app.utils.geo_utils import coerce_point, haversine_miles

logger = logging.getLogger(__name__)

PROXIMITY_POINTS = (40, 30, 15)
SPECIALIST_POINTS = 25
GENERALIST_POINTS = 10
TOP_RATING_POINTS = 20
GOOD_RATING_POINTS = 15
FAST_RESPONSE_POINTS = 10
OK_RESPONSE_POINTS = 7
AVAILABLE_POINTS = 5


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def find_schedule_conflicts(
    commitments: Iterable[Commitment],
    proposed_date: datetime,
    duration_hours: float,
) -> list[Commitment]:
    """Commitments whose [start, end) overlaps the proposed visit window."""
    start = _as_utc(proposed_date)
    end = start + timedelta(hours=duration_hours)
    return [
        c for c in commitments
        if _as_utc(c.start) < end and start < _as_utc(c.end)
    ]


def _proximity(distance: Optional[float]) -> tuple[int, Optional[str]]:
    if distance is None:
        return 0, None
    near, mid, far = PROXIMITY_POINTS
    if distance <= settings.MATCH_NEAR_MILES:
        return near, f"within {distance:.1f} miles"
    if distance <= settings.MATCH_MID_MILES:
        return mid, f"{distance:.1f} miles away"
    if distance <= settings.MATCH_FAR_MILES:
        return far, f"{distance:.1f} miles away"
    return 0, None


def _resolve_point(point, what: str, ident: str):
    resolved = coerce_point(point)
    if resolved is not None:
        return resolved
    if settings.MATCH_ZERO_LOCATION_FALLBACK:
        # TODO: drop the (0, 0) substitution once every job stores coordinates
        logger.warning("No %s location for %s; scoring distance from (0, 0)", what, ident)
        return 0.0, 0.0
    logger.warning("No %s location for %s; proximity not scored", what, ident)
    return None


def score_candidate(
    job: JobDescriptor,
    candidate: Candidate,
    proposed_date: Optional[datetime] = None,
    estimated_duration_hours: Optional[float] = None,
) -> LandscaperMatch:
    reasons: list[str] = []
    score = 0

    origin = _resolve_point(job.client_location, "job", job.job_id)
    area = _resolve_point(candidate.service_area, "service area", candidate.id)
    distance = None
    if origin is not None and area is not None:
        distance = haversine_miles(origin[0], origin[1], area[0], area[1])
    points, reason = _proximity(distance)
    score += points
    if reason:
        reasons.append(reason)

    if job.service_type and job.service_type in candidate.specialties:
        score += SPECIALIST_POINTS
        reasons.append(f"{job.service_type} specialist")
    elif candidate.specialties:
        score += GENERALIST_POINTS

    avg_rating = sum(candidate.ratings) / len(candidate.ratings) if candidate.ratings else 0.0
    if avg_rating >= 4.5:
        score += TOP_RATING_POINTS
        reasons.append(f"{avg_rating:.1f}★ rating")
    elif avg_rating >= 4.0:
        score += GOOD_RATING_POINTS
        reasons.append(f"{avg_rating:.1f}★ rating")

    response_time = candidate.avg_response_time_hours
    if response_time is None:
        response_time = settings.MATCH_DEFAULT_RESPONSE_HOURS
    if response_time <= 2:
        score += FAST_RESPONSE_POINTS
        reasons.append("fast responder")
    elif response_time <= 6:
        score += OK_RESPONSE_POINTS

    if candidate.available:
        score += AVAILABLE_POINTS
        reasons.append("available now")

    conflict_penalty = 0
    if proposed_date is not None:
        duration = estimated_duration_hours
        if duration is None:
            duration = settings.DEFAULT_JOB_DURATION_HOURS
        conflicts = find_schedule_conflicts(candidate.commitments, proposed_date, duration)
        if conflicts:
            conflict_penalty = settings.MATCH_CONFLICT_PENALTY
            score -= conflict_penalty
            reasons.append(f"{len(conflicts)} schedule conflict(s)")
        else:
            reasons.append("no schedule conflicts")

    return LandscaperMatch(
        id=candidate.id,
        name=candidate.name,
        email=candidate.email,
        phone=candidate.phone,
        specialties=list(candidate.specialties),
        score=max(0, min(100, round(score))),
        distance=round(distance, 1) if distance is not None else None,
        rating=round(avg_rating, 1),
        total_reviews=len(candidate.ratings),
        avg_response_time_hours=response_time,
        available=candidate.available,
        match_reasons=reasons,
        has_schedule_conflict=conflict_penalty > 0,
        conflict_penalty=conflict_penalty,
    )


def _rank_key(match: LandscaperMatch):
    distance = match.distance if match.distance is not None else float("inf")
    return (-match.score, distance, match.id)


def rank_matches(matches: Iterable[LandscaperMatch]) -> list[LandscaperMatch]:
    """Score desc, then closer first, then id for a total order."""
    return sorted(matches, key=_rank_key)


def find_best_matches(
    job: JobDescriptor,
    candidates: Iterable[Candidate],
    limit: Optional[int] = None,
    proposed_date: Optional[datetime] = None,
    estimated_duration_hours: Optional[float] = None,
) -> list[LandscaperMatch]:
    if limit is None:
        limit = settings.MATCH_DEFAULT_LIMIT
    if limit <= 0:
        return []
    scored = [
        score_candidate(job, c, proposed_date, estimated_duration_hours)
        for c in candidates
    ]
    if not scored:
        return []
    ranked = rank_matches(scored)[:limit]
    logger.debug("Ranked %d candidates for job %s", len(scored), job.job_id)
    return ranked
