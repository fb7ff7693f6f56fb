#!/usr/bin/env python3
"""
Requirement Models - raw drafts and canonical requirement sets.

A RequirementSetDraft is what a vacancy editor or a free-text extractor hands
in; a RequirementSet is the canonical, immutable, versioned form the scorer
consumes. Editing a vacancy produces a new RequirementSet with a higher
version, never a mutated one.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from core.taxonomy.models import ProficiencyLevel

# Role seniority, lowest first
SENIORITY_LEVELS = ('junior', 'middle', 'senior', 'lead')


class DraftSkill(BaseModel):
    """One skill as provided by a requirement source."""
    skill_id: Optional[str] = None
    name: Optional[str] = None
    level: Optional[Union[str, int]] = None  # None = NormalizerConfig.default_level
    weight: float = Field(default=0.5, ge=0, le=1)
    required: bool = True
    is_critical: Optional[bool] = None


class DraftExperience(BaseModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    areas: List[str] = Field(default_factory=list)


class RequirementSetDraft(BaseModel):
    """Raw requirement set from a vacancy or a free-text extraction."""
    id: str
    version: int = Field(default=0, ge=0)
    skills: List[DraftSkill] = Field(default_factory=list)
    experience_years: DraftExperience = Field(default_factory=DraftExperience)
    department: Optional[str] = None
    level: Optional[str] = None
    position: Optional[str] = None
    readiness_required: Optional[bool] = None
    keywords: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class RequiredSkill:
    """A single canonical requirement. Keyword requirements carry an unresolved name as skill_id."""
    skill_id: str
    level: ProficiencyLevel
    weight: float
    is_critical: bool = False
    required: bool = True
    name: str = ""
    is_keyword: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.skill_id


@dataclass(frozen=True)
class ExperienceRange:
    min: float = 0.0
    max: Optional[float] = None  # None = open-ended


@dataclass(frozen=True)
class RequirementSet:
    """Canonical, versioned requirement set."""
    id: str
    version: int
    required_skills: Tuple[RequiredSkill, ...]
    experience_years: ExperienceRange = field(default_factory=ExperienceRange)
    department: Optional[str] = None
    level: Optional[str] = None
    readiness_required: Optional[bool] = None
    keywords: Tuple[str, ...] = ()
    experience_areas: Tuple[str, ...] = ()

    @property
    def mandatory(self) -> List[RequiredSkill]:
        return [r for r in self.required_skills if r.required]

    @property
    def preferred(self) -> List[RequiredSkill]:
        return [r for r in self.required_skills if not r.required]

    @property
    def skill_ids(self) -> List[str]:
        return [r.skill_id for r in self.required_skills]

    @property
    def total_weight(self) -> float:
        return sum(r.weight for r in self.required_skills)

    @property
    def is_degenerate(self) -> bool:
        """Nothing meaningful to score against."""
        return not self.required_skills or self.total_weight <= 0
