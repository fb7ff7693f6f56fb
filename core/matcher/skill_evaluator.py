#!/usr/bin/env python3
"""
Skill Match Evaluator - per-skill gap and contribution for one candidate.

For every requirement (required and preferred):

- held at or above the bar (gap <= 0):
    weight * base_unit * min(cand - req + 1, overqualification_cap_levels)
  more than OVERQUALIFIED_MARGIN levels above the bar is reported as
  overqualified but earns nothing beyond the cap
- held below the bar (gap > 0):
    weight * base_unit / 2 * cand / req
  never more than weight * base_unit / 2, so a below-bar skill stays
  strictly under the unbonused at-bar contribution whatever the bonuses
- endorsements and recent use multiply the contribution
- absent: gap = MAX_ORDINAL_SPAN, contribution = -critical_penalty or
  -minor_penalty

skill_score = clamp(0, 100, sum(contribution) / ceiling * 100), where the
ceiling is what every requirement contributes when held exactly at its bar:
sum(weight) * base_unit. Meeting every bar scores 100; a candidate below
every bar stays at or under 50.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from core.config_loader import SkillMatchConfig
from core.matcher.models import Candidate, CandidateSkill, SkillEvaluation, SkillMatch
from core.requirements.models import RequiredSkill, RequirementSet
from core.taxonomy import MAX_ORDINAL_SPAN, SkillTaxonomy
from core.utils import clamp, within_months

logger = logging.getLogger(__name__)

KEYWORD_CATEGORY = "other"
# Levels above the bar before a skill counts as overqualified
OVERQUALIFIED_MARGIN = 1


class SkillMatchEvaluator:
    """Computes SkillMatch lists and the aggregate skill score."""

    def __init__(self, config: Optional[SkillMatchConfig] = None, taxonomy: Optional[SkillTaxonomy] = None):
        self.config = config or SkillMatchConfig()
        self.taxonomy = taxonomy

    def evaluate(self, candidate: Candidate, requirement_set: RequirementSet, as_of: datetime) -> SkillEvaluation:
        matches = [
            self.match_skill(requirement, self._find_candidate_skill(candidate, requirement), as_of)
            for requirement in requirement_set.required_skills
        ]

        total_weight = sum(r.weight for r in requirement_set.required_skills)
        ceiling = total_weight * self.config.base_unit
        if ceiling <= 0:
            skill_score = 0.0
        else:
            skill_score = clamp(sum(m.contribution for m in matches) / ceiling * 100.0)

        return SkillEvaluation(skill_matches=matches, skill_score=skill_score, total_weight=total_weight)

    def match_skill(
        self,
        requirement: RequiredSkill,
        held: Optional[CandidateSkill],
        as_of: datetime
    ) -> SkillMatch:
        category = self._category(requirement)
        required_ordinal = int(requirement.level)

        if held is None:
            penalty = self.config.critical_penalty if requirement.is_critical else self.config.minor_penalty
            return SkillMatch(
                skill_id=requirement.skill_id,
                skill_name=requirement.display_name,
                category=category,
                required=requirement.required,
                is_critical=requirement.is_critical,
                required_level=requirement.level,
                candidate_level=None,
                gap=MAX_ORDINAL_SPAN,
                weight=requirement.weight,
                contribution=-penalty
            )

        candidate_ordinal = int(held.level)
        gap = required_ordinal - candidate_ordinal
        contribution, overqualified = self._contribution(requirement.weight, required_ordinal, candidate_ordinal)
        contribution *= self._bonus_multiplier(held, as_of)
        contribution = min(contribution, self._contribution_cap(requirement.weight, gap))

        return SkillMatch(
            skill_id=requirement.skill_id,
            skill_name=requirement.display_name,
            category=category,
            required=requirement.required,
            is_critical=requirement.is_critical,
            required_level=requirement.level,
            candidate_level=held.level,
            gap=gap,
            weight=requirement.weight,
            contribution=contribution,
            overqualified=overqualified
        )

    def _contribution(self, weight: float, required_ordinal: int, candidate_ordinal: int) -> Tuple[float, bool]:
        base = self.config.base_unit
        if candidate_ordinal >= required_ordinal:
            steps = candidate_ordinal - required_ordinal + 1
            overqualified = candidate_ordinal - required_ordinal > OVERQUALIFIED_MARGIN
            return weight * base * min(steps, self.config.overqualification_cap_levels), overqualified
        return weight * base / 2.0 * max(0.0, candidate_ordinal / required_ordinal), False

    def _contribution_cap(self, weight: float, gap: int) -> float:
        base = self.config.base_unit
        if gap > 0:
            return weight * base / 2.0
        return weight * base * self.config.overqualification_cap_levels

    def _bonus_multiplier(self, held: CandidateSkill, as_of: datetime) -> float:
        multiplier = 1.0
        if held.endorsements > 0:
            multiplier *= self.config.endorsement_bonus
        if within_months(held.last_used_at, as_of, self.config.recency_months):
            multiplier *= self.config.recency_bonus
        return multiplier

    def _find_candidate_skill(self, candidate: Candidate, requirement: RequiredSkill) -> Optional[CandidateSkill]:
        if not requirement.is_keyword:
            return candidate.skill(requirement.skill_id)

        # Keyword requirements: best level among skills whose id/name mentions the keyword
        keyword = requirement.display_name
        hits = []
        for held in candidate.skills:
            if self.taxonomy is not None:
                if self.taxonomy.matches_keyword(held.skill_id, keyword):
                    hits.append(held)
            elif keyword.lower() in held.skill_id.lower():
                hits.append(held)
        if not hits:
            return None
        return sorted(hits, key=lambda s: (-int(s.level), s.skill_id))[0]

    def _category(self, requirement: RequiredSkill) -> str:
        if requirement.is_keyword or self.taxonomy is None:
            return KEYWORD_CATEGORY
        skill = self.taxonomy.get(requirement.skill_id)
        return skill.category if skill else KEYWORD_CATEGORY
