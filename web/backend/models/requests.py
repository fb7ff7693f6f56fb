#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional, Union

from core.requirements import DraftExperience, DraftSkill


class CandidateSkillPayload(BaseModel):
    """A skill held by a candidate."""
    skill_id: str
    level: Union[str, int] = "beginner"
    endorsements: int = Field(default=0, ge=0)
    years_of_experience: float = Field(default=0.0, ge=0)
    last_used_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ExperienceRecordPayload(BaseModel):
    """One position in a candidate's history."""
    title: str = ""
    start_date: datetime
    end_date: Optional[datetime] = None
    department: Optional[str] = None
    is_internal: bool = False


class CandidatePayload(BaseModel):
    """Candidate snapshot supplied by the profile store."""
    id: str
    department: str = ""
    skills: List[CandidateSkillPayload] = Field(default_factory=list)
    experience_records: List[ExperienceRecordPayload] = Field(default_factory=list)
    profile_completeness: int = Field(default=0, ge=0, le=100)
    readiness_for_rotation: bool = False
    career_goals: List[str] = Field(default_factory=list)
    last_active_at: Optional[datetime] = None
    mentorship_interest: bool = False
    total_experience_years: Optional[float] = Field(default=None, ge=0)
    level: Optional[str] = None


class RequirementsPayload(BaseModel):
    """Structured requirements for a vacancy."""
    skills: List[DraftSkill] = Field(default_factory=list)
    experience_years: DraftExperience = Field(default_factory=DraftExperience)
    department: Optional[str] = None
    level: Optional[str] = None
    position: Optional[str] = None
    readiness_required: Optional[bool] = None
    keywords: List[str] = Field(default_factory=list)


class MatchRequest(BaseModel):
    """Request to compute (or fetch) the ranked matches for a requirement set.

    Exactly one of requirements or query is expected; query is a free-text
    search that is turned into requirements by keyword extraction.
    """
    version: int = Field(default=0, ge=0, description="Monotonic requirement set version")
    requirements: Optional[RequirementsPayload] = None
    query: Optional[str] = Field(None, description="Free-text search, used when requirements is absent")
    candidates: List[CandidatePayload] = Field(default_factory=list)
    force: bool = Field(default=False, description="Recompute even if this version is cached")
    min_score: Optional[float] = Field(None, ge=0, le=100, description="Minimum overall score filter")
    top_k: Optional[int] = Field(None, ge=1, le=500, description="Maximum results to return")
    include_not_ready: Optional[bool] = Field(None, description="Score candidates without the rotation flag")


class CandidateUpdateRequest(BaseModel):
    """Notification that a candidate profile changed."""
    skill_ids: Optional[List[str]] = Field(None, description="Skills touched by the change, null = whole profile")
