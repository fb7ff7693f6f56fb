#!/usr/bin/env python3
"""
Requirement Normalizer - raw drafts to canonical RequirementSets.

Contract:
- skill names resolve against the taxonomy (exact, synonym, substring)
- unresolved names are kept as keyword requirements with a weight penalty,
  never dropped, and reported as SkillResolutionWarning
- duplicates on one skill id keep the higher weight and the stricter level
- weights are per-skill importance and are NOT renormalised here; the
  evaluator divides by the total weight at aggregation time
- a reversed experience range or an empty requirement set raises
  ValidationError before anything is scored
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.config_loader import NormalizerConfig
from core.exceptions import ValidationError, SkillResolutionWarning
from core.requirements.extraction import RequirementExtractor, ExtractionCache, extract_with_fallback
from core.requirements.models import (
    DraftSkill, ExperienceRange, RequiredSkill, RequirementSet, RequirementSetDraft
)
from core.taxonomy import ProficiencyLevel, SkillTaxonomy

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Canonical requirement set plus the non-fatal warnings raised while building it."""
    requirement_set: RequirementSet
    warnings: List[SkillResolutionWarning] = field(default_factory=list)

    @property
    def unresolved(self) -> List[str]:
        return [w.name for w in self.warnings]


class RequirementNormalizer:
    """Converts RequirementSetDrafts into canonical RequirementSets."""

    def __init__(
        self,
        taxonomy: SkillTaxonomy,
        config: Optional[NormalizerConfig] = None,
        extraction_cache: Optional[ExtractionCache] = None
    ):
        self.taxonomy = taxonomy
        self.config = config or NormalizerConfig()
        self.extraction_cache = extraction_cache or ExtractionCache()

    def normalize(self, draft: RequirementSetDraft) -> NormalizationResult:
        """Build a canonical RequirementSet from a draft.

        Raises:
            ValidationError: reversed experience range, or nothing to score.
        """
        exp = draft.experience_years
        if exp.min is not None and exp.max is not None and exp.min > exp.max:
            raise ValidationError(
                f"Requirement set {draft.id}: experience min ({exp.min}) exceeds max ({exp.max})"
            )

        warnings: List[SkillResolutionWarning] = []
        merged: Dict[str, RequiredSkill] = {}

        for draft_skill in draft.skills:
            requirement = self._to_required_skill(draft_skill, warnings)
            if requirement is None:
                continue
            self._merge(merged, requirement)

        for keyword in draft.keywords:
            requirement = self._keyword_requirement(keyword, merged)
            if requirement is not None:
                self._merge(merged, requirement)

        if not merged:
            raise ValidationError(
                f"Requirement set {draft.id} has no skills and no keywords; nothing to score"
            )

        requirement_set = RequirementSet(
            id=draft.id,
            version=draft.version,
            required_skills=tuple(merged.values()),
            experience_years=ExperienceRange(min=exp.min or 0.0, max=exp.max),
            department=draft.department,
            level=draft.level,
            readiness_required=draft.readiness_required,
            keywords=tuple(k.strip() for k in draft.keywords if k and k.strip()),
            experience_areas=tuple(exp.areas)
        )

        logger.info(
            f"Normalized requirement set {draft.id} v{draft.version}: "
            f"{len(requirement_set.required_skills)} requirements, {len(warnings)} unresolved"
        )
        return NormalizationResult(requirement_set=requirement_set, warnings=warnings)

    def from_text(
        self,
        query_id: str,
        version: int,
        query: str,
        extractor: Optional[RequirementExtractor] = None
    ) -> NormalizationResult:
        """Extract requirements from a free-text query, then normalize them.

        The extractor is called at most once per distinct query text; failed
        extractions fall back to taxonomy keyword spotting.
        """
        extracted = extract_with_fallback(
            query, self.taxonomy, extractor, self.config, cache=self.extraction_cache
        )
        draft = RequirementSetDraft(id=query_id, version=version, **extracted)
        return self.normalize(draft)

    def _to_required_skill(
        self,
        draft_skill: DraftSkill,
        warnings: List[SkillResolutionWarning]
    ) -> Optional[RequiredSkill]:
        raw_name = (draft_skill.skill_id or draft_skill.name or "").strip()
        if not raw_name:
            logger.warning("Dropping requirement skill with neither id nor name")
            return None

        try:
            raw_level = draft_skill.level if draft_skill.level is not None else self.config.default_level
            level = ProficiencyLevel.parse(raw_level)
        except ValueError as e:
            raise ValidationError(f"Skill '{raw_name}': {e}") from e

        is_critical = draft_skill.is_critical
        if is_critical is None:
            is_critical = draft_skill.weight >= self.config.critical_weight_threshold

        skill_id = None
        if draft_skill.skill_id and draft_skill.skill_id in self.taxonomy:
            skill_id = draft_skill.skill_id
        if skill_id is None:
            skill_id = self.taxonomy.resolve(raw_name)
            if skill_id is None and draft_skill.name and draft_skill.name.strip() != raw_name:
                skill_id = self.taxonomy.resolve(draft_skill.name)

        if skill_id is None:
            warning = SkillResolutionWarning(raw_name)
            warnings.append(warning)
            logger.warning(str(warning))
            return RequiredSkill(
                skill_id=raw_name.lower(),
                level=level,
                weight=draft_skill.weight * self.config.unresolved_weight_factor,
                is_critical=is_critical,
                required=draft_skill.required,
                name=raw_name,
                is_keyword=True
            )

        return RequiredSkill(
            skill_id=skill_id,
            level=level,
            weight=draft_skill.weight,
            is_critical=is_critical,
            required=draft_skill.required,
            name=self.taxonomy.name_of(skill_id)
        )

    def _keyword_requirement(self, keyword: str, merged: Dict[str, RequiredSkill]) -> Optional[RequiredSkill]:
        """Preferred requirement for an extracted keyword not already covered by a skill."""
        text = (keyword or "").strip()
        if not text:
            return None
        skill_id = self.taxonomy.resolve(text)
        key = skill_id or text.lower()
        if key in merged:
            return None
        return RequiredSkill(
            skill_id=key,
            level=ProficiencyLevel.BEGINNER,
            weight=self.config.keyword_weight * (1.0 if skill_id else self.config.unresolved_weight_factor),
            is_critical=False,
            required=False,
            name=self.taxonomy.name_of(skill_id) if skill_id else text,
            is_keyword=skill_id is None
        )

    @staticmethod
    def _merge(merged: Dict[str, RequiredSkill], requirement: RequiredSkill) -> None:
        existing = merged.get(requirement.skill_id)
        if existing is None:
            merged[requirement.skill_id] = requirement
            return
        merged[requirement.skill_id] = RequiredSkill(
            skill_id=existing.skill_id,
            level=max(existing.level, requirement.level),
            weight=max(existing.weight, requirement.weight),
            is_critical=existing.is_critical or requirement.is_critical,
            required=existing.required or requirement.required,
            name=existing.name or requirement.name,
            is_keyword=existing.is_keyword and requirement.is_keyword
        )
