#!/usr/bin/env python3
"""
Overall Score - weighted combination of the five sub-scores.

The weighted sum is accumulated in a fixed order (skills, experience,
readiness, cultural, growth) and only the final value is rounded, half up,
so identical sub-scores always give the identical integer.
"""

from core.config_loader import ReadinessThresholds, ScoringWeights
from core.scorer.models import ReadinessLevel, SubScores
from core.utils import clamp, round_half_up


def weighted_sum(sub_scores: SubScores, weights: ScoringWeights) -> float:
    total = 0.0
    total += sub_scores.skills * weights.skills
    total += sub_scores.experience * weights.experience
    total += sub_scores.readiness * weights.readiness
    total += sub_scores.cultural * weights.cultural
    total += sub_scores.growth * weights.growth
    return total


def calculate_overall_score(sub_scores: SubScores, weights: ScoringWeights) -> int:
    return int(clamp(round_half_up(weighted_sum(sub_scores, weights)), 0, 100))


def readiness_level_for(score: int, thresholds: ReadinessThresholds) -> ReadinessLevel:
    if score >= thresholds.ready:
        return ReadinessLevel.READY
    if score >= thresholds.developing:
        return ReadinessLevel.DEVELOPING
    return ReadinessLevel.NOT_READY
