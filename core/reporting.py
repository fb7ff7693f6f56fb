#!/usr/bin/env python3
"""
Reporting - vacancy reports and search summaries over a computed MatchBatch.

Both are read-only views of results already in the cache; nothing here
scores a candidate again.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from core.scorer.models import CandidateMatch, MatchBatch, ReadinessLevel
from core.utils import round_half_up

logger = logging.getLogger(__name__)

TOP_CANDIDATES = 5
SUMMARY_TOP_CANDIDATES = 3

EXCELLENT_SCORE = 80
GOOD_SCORE = 60
POTENTIAL_SCORE = 40


@dataclass
class SkillGapCount:
    skill_id: str
    skill_name: str
    required: bool
    missing: int = 0
    insufficient: int = 0


@dataclass
class VacancyReport:
    requirement_set_id: str
    version: int
    total_candidates: int
    ready_candidates: int
    average_score: int
    top_candidates: List[CandidateMatch]
    skill_gaps: List[SkillGapCount]
    failed_candidates: int
    generated_at: datetime = field(default_factory=datetime.now)


def analyze_skill_gaps(matches: List[CandidateMatch]) -> List[SkillGapCount]:
    """Count, per requirement, how many candidates lack the skill or hold it below the bar."""
    gaps: Dict[str, SkillGapCount] = {}
    for match in matches:
        for skill_match in match.skill_matches:
            counts = gaps.get(skill_match.skill_id)
            if counts is None:
                counts = SkillGapCount(
                    skill_id=skill_match.skill_id,
                    skill_name=skill_match.skill_name,
                    required=skill_match.required
                )
                gaps[skill_match.skill_id] = counts
            if not skill_match.is_present:
                counts.missing += 1
            elif skill_match.gap > 0:
                counts.insufficient += 1
    return list(gaps.values())


def generate_vacancy_report(batch: MatchBatch, generated_at: Optional[datetime] = None) -> VacancyReport:
    matches = batch.matches
    average = 0
    if matches:
        average = round_half_up(sum(m.overall_score for m in matches) / len(matches))

    report = VacancyReport(
        requirement_set_id=batch.requirement_set_id,
        version=batch.version,
        total_candidates=len(matches),
        ready_candidates=sum(1 for m in matches if m.readiness_level == ReadinessLevel.READY),
        average_score=average,
        top_candidates=list(matches[:TOP_CANDIDATES]),
        skill_gaps=analyze_skill_gaps(matches),
        failed_candidates=len(batch.failures),
        generated_at=generated_at or datetime.now()
    )
    logger.info(
        f"Vacancy report for {batch.requirement_set_id} v{batch.version}: "
        f"{report.total_candidates} candidates, {report.ready_candidates} ready"
    )
    return report


def generate_search_summary(query: str, matches: List[CandidateMatch]) -> str:
    """One-paragraph summary of a ranked result list, grouped into score buckets."""
    if not matches:
        return (
            f'No suitable candidates found for "{query}". '
            f'Consider widening the criteria or training existing employees.'
        )

    average = sum(m.overall_score for m in matches) / len(matches)
    excellent = sum(1 for m in matches if m.overall_score >= EXCELLENT_SCORE)
    good = sum(1 for m in matches if GOOD_SCORE <= m.overall_score < EXCELLENT_SCORE)
    potential = sum(1 for m in matches if POTENTIAL_SCORE <= m.overall_score < GOOD_SCORE)

    parts = [
        f'Found {len(matches)} candidates for "{query}".',
        f'Average match score: {average:.1f}%.',
    ]
    if excellent:
        parts.append(f'Excellent candidates: {excellent}.')
    if good:
        parts.append(f'Good candidates: {good}.')
    if potential:
        parts.append(f'Potential candidates: {potential}.')

    top = ", ".join(f"{m.candidate_id} ({m.overall_score}%)" for m in matches[:SUMMARY_TOP_CANDIDATES])
    parts.append(f'Top candidates: {top}.')
    return " ".join(parts)
