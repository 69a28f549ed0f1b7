# app/models/matching.py
from datetime import datetime
from typing import Literal, Optional, List

from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    lat: float
    lng: float


class Commitment(BaseModel):
    job_id: str
    start: datetime
    end: datetime


class Candidate(BaseModel):
    id: str
    name: str = "Landscaper"
    email: str = ""
    phone: str = ""
    specialties: List[str] = Field(default_factory=list)
    service_area: Optional[GeoPoint] = None
    ratings: List[float] = Field(default_factory=list)       # individual review stars
    avg_response_time_hours: Optional[float] = None
    available: bool = False
    commitments: List[Commitment] = Field(default_factory=list)


class JobDescriptor(BaseModel):
    job_id: str
    client_location: Optional[GeoPoint] = None
    service_type: str = ""
    urgency: Optional[Literal["low", "medium", "high"]] = None


class LandscaperMatch(BaseModel):
    id: str
    name: str
    email: str = ""
    phone: str = ""
    specialties: List[str] = Field(default_factory=list)
    score: int
    distance: Optional[float] = None
    rating: float = 0.0
    total_reviews: int = 0
    avg_response_time_hours: float
    available: bool
    match_reasons: List[str] = Field(default_factory=list)
    has_schedule_conflict: bool = False
    conflict_penalty: int = 0


class MatchRequest(BaseModel):
    limit: Optional[int] = None
    proposed_date: Optional[datetime] = None
    estimated_duration_hours: Optional[float] = None


class AssignRequest(BaseModel):
    landscaper_id: str
    actor: str = "admin"
