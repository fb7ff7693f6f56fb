#!/usr/bin/env python3
"""
Scoring Service - multi-factor scoring of a candidate pool.

For each candidate:
- Skill score from the Skill Match Evaluator
- Experience, readiness, cultural and growth sub-scores
- Overall score: weighted sum, rounded half up once at the end
- Explanation derived from those same intermediate values

Candidates are independent, so the pool can be scored in parallel. A
candidate that raises is excluded from the ranking and reported as a
ComputationFailure; one bad record never aborts the batch.

A ResultPolicy filters and truncates a ranked list. Callers that cache the
ranking keep the full pool and apply the policy on the way out, so one
request's policy never shapes another's results.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, Union
import logging

from core.config_loader import MatchingConfig, ResultPolicy
from core.exceptions import ComputationFailure
from core.matcher.models import Candidate
from core.matcher.skill_evaluator import SkillMatchEvaluator
from core.requirements.models import RequirementSet
from core.taxonomy import SkillTaxonomy

from core.scorer.models import CandidateMatch, SubScores
from core.scorer import sub_scores as sub_score_calculations
from core.scorer.explainability import generate_explanation
from core.scorer.overall import calculate_overall_score, readiness_level_for

logger = logging.getLogger(__name__)

ScoreOutcome = Union[CandidateMatch, ComputationFailure]


def rank_matches(matches: List[CandidateMatch]) -> List[CandidateMatch]:
    """Overall score descending, candidate id ascending on ties."""
    return sorted(matches, key=lambda m: (-m.overall_score, m.candidate_id))


def apply_result_policy(matches: List[CandidateMatch], policy: Optional[ResultPolicy]) -> List[CandidateMatch]:
    """Filter and truncate an already-ranked list.

    The input list is returned as-is when the policy removes nothing.
    """
    if policy is None:
        return matches

    filtered = matches
    if not policy.include_not_ready:
        filtered = [m for m in filtered if m.ready_for_rotation]
    if policy.min_score_threshold > 0:
        filtered = [m for m in filtered if m.overall_score >= policy.min_score_threshold]
    if policy.top_k is not None:
        filtered = filtered[:policy.top_k]
    return matches if len(filtered) == len(matches) else filtered


class ScoringService:
    """
    Scores candidates against a canonical RequirementSet.

    Holds no mutable state; safe to share between threads.
    """

    def __init__(self, config: Optional[MatchingConfig] = None, taxonomy: Optional[SkillTaxonomy] = None):
        self.config = config or MatchingConfig()
        self.taxonomy = taxonomy
        self.evaluator = SkillMatchEvaluator(self.config.skill_match, taxonomy)

    def score_candidate(
        self,
        candidate: Candidate,
        requirement_set: RequirementSet,
        as_of: datetime
    ) -> CandidateMatch:
        """Score one candidate. Pure function of (candidate, requirement_set, as_of)."""
        scorer_config = self.config.scorer

        evaluation = self.evaluator.evaluate(candidate, requirement_set, as_of)
        experience, experience_components = sub_score_calculations.calculate_experience_score(
            candidate, requirement_set, as_of, scorer_config
        )
        readiness, readiness_components = sub_score_calculations.calculate_readiness_score(candidate, as_of)
        cultural, cultural_components = sub_score_calculations.calculate_cultural_score(candidate, requirement_set)
        growth, growth_components = sub_score_calculations.calculate_growth_score(candidate, as_of, scorer_config)

        sub_scores = SubScores(
            skills=evaluation.skill_score,
            experience=experience,
            readiness=readiness,
            cultural=cultural,
            growth=growth,
            components={
                'skills': {
                    'total_weight': evaluation.total_weight,
                    'matched': len(evaluation.matched),
                    'missing': len(evaluation.missing),
                    'underleveled': len(evaluation.underleveled),
                },
                'experience': experience_components,
                'readiness': readiness_components,
                'cultural': cultural_components,
                'growth': growth_components,
            }
        )

        overall_score = calculate_overall_score(sub_scores, scorer_config.weights)
        explanation = generate_explanation(evaluation, sub_scores, self.config.explanation)

        logger.debug(
            f"Candidate {candidate.id} vs {requirement_set.id} v{requirement_set.version}: "
            f"skills={evaluation.skill_score:.1f}, experience={experience:.1f}, readiness={readiness:.1f}, "
            f"cultural={cultural:.1f}, growth={growth:.1f}, overall={overall_score}"
        )

        return CandidateMatch(
            candidate_id=candidate.id,
            requirement_set_id=requirement_set.id,
            requirement_version=requirement_set.version,
            overall_score=overall_score,
            sub_scores=sub_scores,
            skill_matches=list(evaluation.skill_matches),
            readiness_level=readiness_level_for(overall_score, scorer_config.readiness_levels),
            explanation=explanation,
            computed_at=as_of,
            ready_for_rotation=candidate.readiness_for_rotation
        )

    def _score_safely(self, candidate: Candidate, requirement_set: RequirementSet, as_of: datetime) -> ScoreOutcome:
        try:
            return self.score_candidate(candidate, requirement_set, as_of)
        except Exception as e:
            candidate_id = str(getattr(candidate, 'id', '<unknown>'))
            logger.error(f"Excluding candidate {candidate_id} from {requirement_set.id}: {e}", exc_info=True)
            return ComputationFailure(candidate_id=candidate_id, reason=str(e), error_type=type(e).__name__)

    def score_pool(
        self,
        candidates: Sequence[Candidate],
        requirement_set: RequirementSet,
        as_of: datetime,
        result_policy: Optional[ResultPolicy] = None
    ) -> Tuple[List[CandidateMatch], List[ComputationFailure]]:
        """Score every eligible candidate.

        A requirement set that demands readiness skips candidates without the
        rotation flag. Everyone else is scored and ranked; result_policy, when
        given, is applied to the ranking.

        Returns:
            (ranked matches, per-candidate failures)
        """
        if requirement_set.readiness_required:
            pool = [c for c in candidates if c.readiness_for_rotation]
            if len(pool) < len(candidates):
                logger.info(f"{len(candidates) - len(pool)} candidates not ready for rotation were skipped")
        else:
            pool = list(candidates)

        workers = self.config.scorer.max_workers
        if workers > 1 and len(pool) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(lambda c: self._score_safely(c, requirement_set, as_of), pool))
        else:
            outcomes = [self._score_safely(c, requirement_set, as_of) for c in pool]

        matches = [o for o in outcomes if isinstance(o, CandidateMatch)]
        failures = [o for o in outcomes if isinstance(o, ComputationFailure)]

        ranked = apply_result_policy(rank_matches(matches), result_policy)
        logger.info(
            f"Scored {len(matches)} candidates for {requirement_set.id} v{requirement_set.version}, "
            f"returning {len(ranked)} ({len(failures)} failed)"
        )
        return ranked, failures
