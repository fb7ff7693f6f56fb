#!/usr/bin/env python3
"""
Scoring Module - multi-factor scoring and explanations.

Public API:
- ScoringService: scores a candidate pool against a RequirementSet
- CandidateMatch, MatchBatch, MatchExplanation, SubScores: result types

Modules:

- models.py: Data structures (CandidateMatch, SubScores, MatchExplanation, MatchBatch)
- sub_scores.py: Experience, readiness, cultural and growth sub-scores
- overall.py: Weighted overall score and readiness buckets
- explainability.py: Explanation generator
- service.py: ScoringService orchestrator
"""

from core.scorer.models import (
    CandidateMatch, MatchBatch, MatchExplanation, ReadinessLevel, SubScores
)
from core.scorer.service import ScoringService, apply_result_policy, rank_matches

__all__ = [
    'ScoringService', 'apply_result_policy', 'rank_matches',
    'CandidateMatch', 'MatchBatch', 'MatchExplanation', 'ReadinessLevel', 'SubScores'
]
