#!/usr/bin/env python3
"""
Matcher Models - candidate snapshots and per-skill match results.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from datetime import datetime, date
from dateutil import parser as date_parser

from core.taxonomy.models import ProficiencyLevel
from core.utils import years_between


def _parse_date(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return date_parser.parse(str(value))


@dataclass(frozen=True)
class CandidateSkill:
    """A skill held by a candidate."""
    skill_id: str
    level: ProficiencyLevel
    endorsements: int = 0
    years_of_experience: float = 0.0
    last_used_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ExperienceRecord:
    """One position held by the candidate."""
    title: str
    start_date: datetime
    end_date: Optional[datetime] = None  # None = current position
    department: Optional[str] = None
    is_internal: bool = False


@dataclass
class Candidate:
    """Read-only candidate snapshot handed to the engine by the profile store."""
    id: str
    department: str = ""
    skills: List[CandidateSkill] = field(default_factory=list)
    experience_records: List[ExperienceRecord] = field(default_factory=list)
    profile_completeness: int = 0
    readiness_for_rotation: bool = False
    career_goals: List[str] = field(default_factory=list)
    last_active_at: Optional[datetime] = None
    mentorship_interest: bool = False
    # Explicit total overrides the sum of experience records
    total_experience_years: Optional[float] = None
    # Role seniority (junior, middle, senior, lead); None = unknown
    level: Optional[str] = None

    def skill(self, skill_id: str) -> Optional[CandidateSkill]:
        for s in self.skills:
            if s.skill_id == skill_id:
                return s
        return None

    def calculate_total_experience(self, as_of: datetime) -> float:
        """Total years of experience, open positions counted up to as_of."""
        if self.total_experience_years is not None:
            return max(0.0, float(self.total_experience_years))
        total = 0.0
        for record in self.experience_records:
            end = record.end_date or as_of
            total += years_between(record.start_date, end)
        return round(total, 2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        """Build a snapshot from a plain mapping (API payloads, fixture files)."""
        skills = [
            CandidateSkill(
                skill_id=str(s['skill_id']),
                level=ProficiencyLevel.parse(s.get('level', 'beginner')),
                endorsements=int(s.get('endorsements', 0) or 0),
                years_of_experience=float(s.get('years_of_experience', 0.0) or 0.0),
                last_used_at=_parse_date(s.get('last_used_at')),
                updated_at=_parse_date(s.get('updated_at'))
            )
            for s in data.get('skills') or []
        ]
        records = [
            ExperienceRecord(
                title=r.get('title', ''),
                start_date=_parse_date(r['start_date']),
                end_date=_parse_date(r.get('end_date')),
                department=r.get('department'),
                is_internal=bool(r.get('is_internal', False))
            )
            for r in data.get('experience_records') or []
        ]
        return cls(
            id=str(data['id']),
            department=data.get('department') or "",
            skills=skills,
            experience_records=records,
            profile_completeness=int(data.get('profile_completeness', 0) or 0),
            readiness_for_rotation=bool(data.get('readiness_for_rotation', False)),
            career_goals=list(data.get('career_goals') or []),
            last_active_at=_parse_date(data.get('last_active_at')),
            mentorship_interest=bool(data.get('mentorship_interest', False)),
            total_experience_years=data.get('total_experience_years'),
            level=data.get('level')
        )


@dataclass(frozen=True)
class SkillMatch:
    """Result of matching one requirement against one candidate."""
    skill_id: str
    skill_name: str
    category: str
    required: bool
    is_critical: bool
    required_level: ProficiencyLevel
    candidate_level: Optional[ProficiencyLevel]
    gap: int
    weight: float
    contribution: float
    overqualified: bool = False

    @property
    def is_present(self) -> bool:
        return self.candidate_level is not None

    @property
    def meets_requirement(self) -> bool:
        return self.is_present and self.gap <= 0


@dataclass(frozen=True)
class SkillEvaluation:
    """All skill matches for one candidate plus the aggregate skill score."""
    skill_matches: List[SkillMatch]
    skill_score: float
    total_weight: float

    @property
    def matched(self) -> List[SkillMatch]:
        return [m for m in self.skill_matches if m.meets_requirement]

    @property
    def missing(self) -> List[SkillMatch]:
        return [m for m in self.skill_matches if not m.is_present]

    @property
    def underleveled(self) -> List[SkillMatch]:
        return [m for m in self.skill_matches if m.is_present and m.gap > 0]

    @property
    def overqualified(self) -> List[SkillMatch]:
        return [m for m in self.skill_matches if m.overqualified]

    @property
    def is_degenerate(self) -> bool:
        return not self.skill_matches or self.total_weight <= 0
