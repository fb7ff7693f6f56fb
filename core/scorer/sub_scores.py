#!/usr/bin/env python3
"""
Sub-score Calculations - experience, readiness, cultural fit and growth.

Each function returns (score, components): a [0,100] score and the
breakdown of how it was reached. The components are what the explanation
generator reads later, so it never has to look at the candidate again.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from core.config_loader import ScorerConfig
from core.matcher.models import Candidate
from core.requirements.models import RequirementSet
from core.utils import clamp, days_between, within_months

logger = logging.getLogger(__name__)

ScoreWithComponents = Tuple[float, Dict[str, Any]]


def calculate_experience_score(
    candidate: Candidate,
    requirement_set: RequirementSet,
    as_of: datetime,
    config: ScorerConfig
) -> ScoreWithComponents:
    """
    Experience fit.

    Over-experience is penalised with a gentle, capped slope; under-experience
    with a steep one. Being overqualified is a softer problem than being
    underqualified. Requested experience areas the candidate does not cover
    scale the result down. Role seniority is recorded in the components for the
    explanation and does not move the score.
    """
    total = candidate.calculate_total_experience(as_of)
    required = requirement_set.experience_years
    score = config.experience_base
    components: Dict[str, Any] = {
        'total_years': total,
        'required_min': required.min,
        'required_max': required.max,
    }

    if total >= required.min:
        score += config.experience_min_bonus
        if required.max is None or total <= required.max:
            score += config.experience_range_bonus
            components['in_range'] = True
        else:
            excess = total - required.max
            penalty = min(config.experience_excess_cap, excess * config.experience_excess_slope)
            score -= penalty
            components['excess_years'] = excess
            components['excess_penalty'] = penalty
    else:
        deficit = required.min - total
        penalty = deficit * config.experience_deficit_slope
        score -= penalty
        components['deficit_years'] = deficit
        components['deficit_penalty'] = penalty

    score = clamp(score)
    if requirement_set.experience_areas:
        score = _apply_area_match(score, candidate, requirement_set, config, components)
    components.update(_seniority_components(candidate, requirement_set))

    return score, components


def _candidate_areas(candidate: Candidate) -> List[str]:
    texts = [candidate.department]
    texts += [r.title for r in candidate.experience_records]
    texts += [r.department for r in candidate.experience_records]
    texts += [s.skill_id.replace('-', ' ') for s in candidate.skills]
    return [t for t in (_norm(x) for x in texts) if t]


def _apply_area_match(
    score: float,
    candidate: Candidate,
    requirement_set: RequirementSet,
    config: ScorerConfig,
    components: Dict[str, Any]
) -> float:
    """Scale the experience score down when the requested areas are not covered.

    An area is covered when it and one of the candidate's areas (department,
    past titles and departments, skill ids) contain one another. The
    adjustment only ever lowers the score.
    """
    held = _candidate_areas(candidate)
    requested = [a for a in requirement_set.experience_areas if _norm(a)]
    matched = [a for a in requested if any(_norm(a) in h or h in _norm(a) for h in held)]

    if not matched:
        area_match = 'none'
        adjusted = max(config.experience_area_mismatch_floor, score * config.experience_area_mismatch_factor)
    elif len(matched) < len(requested):
        area_match = 'partial'
        adjusted = max(config.experience_area_partial_floor, score * config.experience_area_partial_factor)
    else:
        area_match = 'full'
        adjusted = score

    components['area_match'] = area_match
    components['required_areas'] = requested
    components['matched_areas'] = matched
    return min(score, adjusted)


def _seniority_components(candidate: Candidate, requirement_set: RequirementSet) -> Dict[str, Any]:
    requested = _norm(requirement_set.level) or None
    held = _norm(candidate.level) or None
    return {
        'requested_level': requested,
        'candidate_level': held,
        # None when the role names no seniority
        'level_match': None if requested is None else held == requested,
    }


def calculate_readiness_score(candidate: Candidate, as_of: datetime) -> ScoreWithComponents:
    score = 50.0
    components: Dict[str, Any] = {
        'rotation_flag': candidate.readiness_for_rotation,
        'profile_completeness': candidate.profile_completeness,
    }

    if candidate.readiness_for_rotation:
        score += 30

    completeness = clamp(float(candidate.profile_completeness))
    score += completeness / 100.0 * 20

    activity_bonus = 0
    if candidate.last_active_at is not None:
        days = days_between(candidate.last_active_at, as_of)
        if days <= 7:
            activity_bonus = 10
        elif days <= 30:
            activity_bonus = 5
    score += activity_bonus
    components['activity_bonus'] = activity_bonus

    return clamp(score), components


def calculate_cultural_score(candidate: Candidate, requirement_set: RequirementSet) -> ScoreWithComponents:
    # Internal candidates start from a same-company presumption
    score = 70.0
    target = _norm(requirement_set.department)

    same_department = False
    if target:
        departments = [candidate.department] + [r.department for r in candidate.experience_records]
        same_department = any(_norm(d) == target for d in departments if d)
    if same_department:
        score += 20

    internal_mobility = any(r.is_internal for r in candidate.experience_records)
    if internal_mobility:
        score += 10

    return clamp(score), {'same_department': same_department, 'internal_mobility': internal_mobility}


def calculate_growth_score(candidate: Candidate, as_of: datetime, config: ScorerConfig) -> ScoreWithComponents:
    """
    Growth potential.

    Recently updated skills count as evidence of learning activity here; they
    are deliberately not part of the skill score.
    """
    score = 50.0
    has_goals = bool(candidate.career_goals)
    if has_goals:
        score += 20

    recent = sum(
        1 for s in candidate.skills
        if within_months(s.updated_at, as_of, config.growth_recent_skill_months)
    )
    if recent >= 3:
        score += 20
    elif recent >= 1:
        score += 10

    if candidate.mentorship_interest:
        score += 10

    return clamp(score), {
        'career_goals': has_goals,
        'recent_skill_updates': recent,
        'mentorship_interest': candidate.mentorship_interest,
    }


def _norm(text: Optional[str]) -> str:
    return (text or "").strip().lower()
