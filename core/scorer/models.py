#!/usr/bin/env python3
"""
Scoring Models - Data structures for scoring results.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from core.exceptions import ComputationFailure
from core.matcher.models import SkillMatch


class ReadinessLevel(str, Enum):
    READY = "ready"
    DEVELOPING = "developing"
    NOT_READY = "not_ready"


@dataclass(frozen=True)
class SubScores:
    """The five bounded [0,100] sub-scores with their component breakdown."""
    skills: float
    experience: float
    readiness: float
    cultural: float
    growth: float
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, float]:
        return {
            'skills': self.skills,
            'experience': self.experience,
            'readiness': self.readiness,
            'cultural': self.cultural,
            'growth': self.growth,
        }


@dataclass(frozen=True)
class MatchExplanation:
    """Human-readable account of a score, derived from the same intermediate values."""
    strengths: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    development_path: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    estimated_readiness_months: int = 0
    confidence: int = 0
    advisory_only: bool = False

    @property
    def time_to_ready(self) -> str:
        months = self.estimated_readiness_months
        return "ready now" if months == 0 else f"{months} month{'s' if months != 1 else ''}"


@dataclass(frozen=True)
class CandidateMatch:
    """Complete scored match of one candidate against one requirement set version."""
    candidate_id: str
    requirement_set_id: str
    requirement_version: int
    overall_score: int
    sub_scores: SubScores
    skill_matches: List[SkillMatch]
    readiness_level: ReadinessLevel
    explanation: MatchExplanation
    computed_at: datetime
    # Rotation flag at scoring time, read by ResultPolicy.include_not_ready
    ready_for_rotation: bool = True

    @property
    def skill_score(self) -> float:
        return self.sub_scores.skills


@dataclass(frozen=True)
class MatchBatch:
    """Ranked matches for one requirement set version, plus candidates that failed to score."""
    requirement_set_id: str
    version: int
    matches: List[CandidateMatch]
    failures: List[ComputationFailure]
    computed_at: datetime
    skill_ids: List[str] = field(default_factory=list)
    # Every candidate id handed to the computation, scored or not
    candidate_pool: List[str] = field(default_factory=list)

    def get(self, candidate_id: str) -> Optional[CandidateMatch]:
        for match in self.matches:
            if match.candidate_id == candidate_id:
                return match
        return None

    @property
    def candidate_ids(self) -> List[str]:
        return [m.candidate_id for m in self.matches]
