#!/usr/bin/env python3
"""
Explainability - strengths, gaps and development path for a match.

generate_explanation is a pure function of the SkillEvaluation and SubScores
the scorer already produced. It never looks at the candidate or the
requirement set again, so the explanation cannot drift from the score it
explains.

Rules:
- strengths: one bullet per matched-skill category (at most 3 clusters),
  plus experience >= 70 and readiness >= 70 bullets, and a seniority bullet when
  the candidate holds the requested seniority
- gaps: up to 3 missing required skills, underleveled skills, experience
  < 50, uncovered experience areas and a seniority below the role
- development path: missing skills first ("Learn"), then underleveled
  skills ("Deepen"), then an experience action when experience < 60
- risk factors: only when readiness < 50 or experience < 50
- readiness estimate: 2 months per missing skill, 1 per underleveled skill,
  6 more when experience < 50, capped
- confidence drops to 0 for a degenerate (empty or weightless) requirement
  set, and the score is flagged advisory-only
"""

from collections import OrderedDict
from typing import Dict, List, Optional
import logging

from core.config_loader import ExplanationConfig
from core.matcher.models import SkillEvaluation, SkillMatch
from core.requirements.models import SENIORITY_LEVELS
from core.scorer.models import MatchExplanation, SubScores

logger = logging.getLogger(__name__)

STRENGTH_THRESHOLD = 70
GAP_THRESHOLD = 50
EXPERIENCE_ACTION_THRESHOLD = 60


def _names(matches: List[SkillMatch], limit: Optional[int] = None) -> str:
    selected = matches if limit is None else matches[:limit]
    return ", ".join(m.skill_name for m in selected)


def _strength_clusters(matched: List[SkillMatch], limit: int) -> List[str]:
    clusters: Dict[str, List[SkillMatch]] = OrderedDict()
    for match in matched:
        clusters.setdefault(match.category, []).append(match)

    ranked = sorted(
        clusters.items(),
        key=lambda item: (-sum(m.contribution for m in item[1]), item[0])
    )
    bullets = []
    for category, members in ranked[:limit]:
        label = category.replace('-', ' ')
        bullets.append(f"Meets requirements in {label}: {_names(members)}")
    return bullets


def _seniority_below(experience: Dict) -> bool:
    requested = experience.get('requested_level')
    held = experience.get('candidate_level')
    if requested not in SENIORITY_LEVELS or held not in SENIORITY_LEVELS:
        return False
    return SENIORITY_LEVELS.index(held) < SENIORITY_LEVELS.index(requested)


def _level_label(match: SkillMatch) -> str:
    held = match.candidate_level.label if match.candidate_level is not None else "none"
    return f"{match.skill_name} ({held} -> {match.required_level.label})"


def generate_explanation(
    evaluation: SkillEvaluation,
    sub_scores: SubScores,
    config: Optional[ExplanationConfig] = None
) -> MatchExplanation:
    """Build a MatchExplanation from already-computed intermediate values."""
    config = config or ExplanationConfig()

    matched = evaluation.matched
    missing = evaluation.missing
    missing_required = [m for m in missing if m.required]
    underleveled = evaluation.underleveled
    overqualified = evaluation.overqualified
    experience = sub_scores.components.get('experience', {})

    strengths: List[str] = _strength_clusters(matched, config.max_strength_clusters)
    if sub_scores.experience >= STRENGTH_THRESHOLD:
        strengths.append("Experience level fits the role")
    if experience.get('level_match'):
        strengths.append(f"Seniority matches the role: {experience['requested_level']}")
    if sub_scores.readiness >= STRENGTH_THRESHOLD:
        strengths.append("High readiness for a new challenge")

    gaps: List[str] = []
    if missing_required:
        gaps.append(f"Missing required skills: {_names(missing_required, config.max_listed_skills)}")
    if underleveled:
        listed = ", ".join(_level_label(m) for m in underleveled[:config.max_listed_skills])
        gaps.append(f"Below required level: {listed}")
    if sub_scores.experience < GAP_THRESHOLD:
        gaps.append("Not enough experience for the role")
    if experience.get('area_match') == 'none':
        gaps.append(f"Experience outside the requested areas: {', '.join(experience['required_areas'])}")
    elif experience.get('area_match') == 'partial':
        missing_areas = [a for a in experience['required_areas'] if a not in experience['matched_areas']]
        gaps.append(f"Partial match of experience areas, missing: {', '.join(missing_areas)}")
    if _seniority_below(experience):
        gaps.append(f"Seniority below the role: {experience['candidate_level']} -> {experience['requested_level']}")

    development_path: List[str] = [f"Learn {m.skill_name}" for m in missing]
    development_path += [
        f"Deepen {m.skill_name} to {m.required_level.label} level" for m in underleveled
    ]
    if sub_scores.experience < EXPERIENCE_ACTION_THRESHOLD:
        development_path.append("Gain more experience on relevant projects")

    risk_factors: List[str] = []
    if sub_scores.readiness < GAP_THRESHOLD:
        risk_factors.append("Low readiness for rotation")
    if sub_scores.experience < GAP_THRESHOLD:
        risk_factors.append("May need extra time to adapt to the role")

    recommendations: List[str] = ["Conduct a technical interview"]
    if gaps:
        recommendations.append("Discuss a plan to close the skill gaps")
    completeness = sub_scores.components.get('readiness', {}).get('profile_completeness')
    if completeness is not None and completeness < config.profile_completeness_target:
        recommendations.append("Ask the candidate to complete their profile")
    if overqualified:
        recommendations.append(f"Could mentor others in: {_names(overqualified, 2)}")
    recommendations.append("Assign an onboarding buddy")

    months = (
        config.months_per_missing_skill * len(missing)
        + config.months_per_underleveled_skill * len(underleveled)
        + (config.months_for_experience_gap if sub_scores.experience < GAP_THRESHOLD else 0)
    )
    months = min(months, config.max_readiness_months)

    advisory_only = evaluation.is_degenerate
    confidence = 0 if advisory_only else config.confidence
    if advisory_only:
        logger.debug("Degenerate requirement set; explanation is advisory only")

    return MatchExplanation(
        strengths=strengths,
        gaps=gaps,
        development_path=development_path,
        risk_factors=risk_factors,
        recommendations=recommendations,
        estimated_readiness_months=months,
        confidence=confidence,
        advisory_only=advisory_only
    )
