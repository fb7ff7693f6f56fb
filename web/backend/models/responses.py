#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


class SkillMatchDetail(BaseModel):
    """How one requirement was matched for a candidate."""
    skill_id: str
    skill_name: str
    category: str
    required: bool
    is_critical: bool
    required_level: str
    candidate_level: Optional[str]
    gap: int
    weight: float
    contribution: float
    overqualified: bool


class ExplanationDetail(BaseModel):
    """Human-readable explanation of a match."""
    strengths: List[str]
    gaps: List[str]
    development_path: List[str]
    risk_factors: List[str]
    recommendations: List[str]
    estimated_readiness_months: int = Field(ge=0)
    time_to_ready: str
    confidence: int = Field(ge=0, le=100)
    advisory_only: bool


class CandidateMatchSummary(BaseModel):
    """Scored match of one candidate."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "candidate_id": "emp-042",
                "requirement_set_id": "vacancy-frontend-lead",
                "requirement_version": 3,
                "overall_score": 84,
                "readiness_level": "ready",
                "sub_scores": {
                    "skills": 100.0,
                    "experience": 90.0,
                    "readiness": 76.0,
                    "cultural": 70.0,
                    "growth": 60.0
                },
                "computed_at": "2026-02-01T12:00:00"
            }
        }
    )

    candidate_id: str
    requirement_set_id: str
    requirement_version: int
    overall_score: int = Field(ge=0, le=100)
    readiness_level: str
    sub_scores: Dict[str, float]
    skill_matches: List[SkillMatchDetail] = Field(default_factory=list)
    explanation: Optional[ExplanationDetail] = None
    computed_at: str


class FailureDetail(BaseModel):
    """A candidate that could not be scored."""
    candidate_id: str
    reason: str
    error_type: str


class MatchesResponse(BaseModel):
    """Ranked matches for one requirement set version."""
    success: bool
    requirement_set_id: str
    version: int
    state: str
    count: int
    matches: List[CandidateMatchSummary]
    failures: List[FailureDetail] = Field(default_factory=list)
    unresolved_skills: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    computed_at: str


class ExplanationResponse(BaseModel):
    """Explanation for one candidate."""
    success: bool
    requirement_set_id: str
    candidate_id: str
    explanation: ExplanationDetail


class SkillGapDetail(BaseModel):
    skill_id: str
    skill_name: str
    required: bool
    missing: int = Field(ge=0)
    insufficient: int = Field(ge=0)


class VacancyReportResponse(BaseModel):
    """Aggregate report over a computed match list."""
    success: bool
    requirement_set_id: str
    version: int
    total_candidates: int = Field(ge=0)
    ready_candidates: int = Field(ge=0)
    average_score: int = Field(ge=0, le=100)
    failed_candidates: int = Field(ge=0)
    top_candidates: List[CandidateMatchSummary]
    skill_gaps: List[SkillGapDetail]
    generated_at: str


class InvalidateResponse(BaseModel):
    """Result of a cache invalidation."""
    success: bool
    invalidated: List[str]
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
    taxonomy_skills: int
    cached_keys: int
    details: Dict[str, Any] = Field(default_factory=dict)
