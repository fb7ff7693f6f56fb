#!/usr/bin/env python3
"""
Matching Engine - entry point for ranked, explainable candidate matches.

Wires the pieces together:
    RequirementSetDraft -> RequirementNormalizer -> RequirementSet
    RequirementSet + candidate pool -> ScoringService -> MatchBatch
    MatchBatch -> MatchCoordinator (one computation per key and version)

Profile changes are not observed here. Callers report them through
invalidate_candidate (or bump the requirement set version) and the next
get_or_compute recomputes.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from core.cache import CacheState, MatchCoordinator
from core.config_loader import MatchingConfig, ResultPolicy
from core.exceptions import MatchNotFoundError
from core.matcher.models import Candidate
from core.reporting import VacancyReport, generate_search_summary, generate_vacancy_report
from core.requirements import (
    NormalizationResult, RequirementExtractor, RequirementNormalizer, RequirementSet, RequirementSetDraft
)
from core.scorer import MatchBatch, MatchExplanation, ScoringService, apply_result_policy
from core.taxonomy import SkillTaxonomy, load_taxonomy

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class MatchingEngine:
    """Facade over normalization, scoring and the match cache."""

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        taxonomy: Optional[SkillTaxonomy] = None,
        clock: Optional[Clock] = None
    ):
        self.config = config or MatchingConfig()
        self.taxonomy = taxonomy or load_taxonomy(self.config.taxonomy_file)
        self.clock = clock or datetime.now
        self.normalizer = RequirementNormalizer(self.taxonomy, self.config.normalizer)
        self.scoring_service = ScoringService(self.config, self.taxonomy)
        self.coordinator: MatchCoordinator[MatchBatch] = MatchCoordinator()

    def normalize(self, draft: RequirementSetDraft) -> NormalizationResult:
        return self.normalizer.normalize(draft)

    def from_text(
        self,
        query_id: str,
        version: int,
        query: str,
        extractor: Optional[RequirementExtractor] = None
    ) -> NormalizationResult:
        return self.normalizer.from_text(query_id, version, query, extractor)

    def get_or_compute(
        self,
        requirement_set: RequirementSet,
        candidates: Sequence[Candidate],
        force: bool = False,
        result_policy: Optional[ResultPolicy] = None
    ) -> MatchBatch:
        """Ranked matches for requirement_set, computed at most once per version.

        The whole ranked pool is cached; result_policy (or the configured
        default) only shapes the returned view of it. Candidates that fail to
        score are reported in MatchBatch.failures; the rest of the pool is
        still ranked.
        """
        key = requirement_set.id
        pool = list(candidates)

        def compute() -> MatchBatch:
            as_of = self.clock()
            matches, failures = self.scoring_service.score_pool(pool, requirement_set, as_of)
            return MatchBatch(
                requirement_set_id=key,
                version=requirement_set.version,
                matches=matches,
                failures=failures,
                computed_at=as_of,
                skill_ids=list(requirement_set.skill_ids),
                candidate_pool=[c.id for c in pool]
            )

        batch = self.coordinator.get_or_compute(key, requirement_set.version, compute, force=force)
        return self.apply_policy(batch, result_policy)

    def apply_policy(self, batch: MatchBatch, result_policy: Optional[ResultPolicy] = None) -> MatchBatch:
        """View of batch filtered by result_policy, or by the configured default.

        The stored batch is returned unchanged when the policy removes nothing.
        """
        policy = result_policy if result_policy is not None else self.config.result_policy
        matches = apply_result_policy(batch.matches, policy)
        if matches is batch.matches:
            return batch
        return replace(batch, matches=matches)

    def get_batch(self, key: str) -> MatchBatch:
        """Last stored batch for key: the whole ranked pool, no result policy applied.

        Raises:
            MatchNotFoundError: nothing has been computed for key
        """
        batch = self.coordinator.peek(key)
        if batch is None:
            raise MatchNotFoundError(f"No computed matches for '{key}'")
        return batch

    def explain(self, candidate_id: str, key: str) -> MatchExplanation:
        """Explanation for one candidate, served from the cached batch."""
        batch = self.get_batch(key)
        match = batch.get(candidate_id)
        if match is None:
            raise MatchNotFoundError(f"Candidate '{candidate_id}' has no match for '{key}'")
        return match.explanation

    def state(self, key: str) -> CacheState:
        return self.coordinator.state(key)

    def invalidate(self, key: str) -> bool:
        return self.coordinator.invalidate(key)

    def invalidate_candidate(self, candidate_id: str, skill_ids: Optional[Iterable[str]] = None) -> List[str]:
        """Invalidate every cached key whose result depends on this candidate's profile.

        Args:
            candidate_id: Candidate whose profile changed
            skill_ids: Skills touched by the change. None means the whole
                profile may have changed.

        Returns:
            Keys that were invalidated
        """
        changed = set(skill_ids) if skill_ids is not None else None
        invalidated = []
        for key in self.coordinator.keys():
            batch = self.coordinator.peek(key)
            if batch is None or candidate_id not in batch.candidate_pool:
                continue
            if changed is not None and not changed.intersection(batch.skill_ids):
                continue
            self.invalidate(key)
            invalidated.append(key)

        if invalidated:
            logger.info(f"Profile update for {candidate_id} invalidated {len(invalidated)} match lists")
        return invalidated

    def report(self, key: str) -> VacancyReport:
        return generate_vacancy_report(self.get_batch(key), generated_at=self.clock())

    def search_summary(self, key: str, query: Optional[str] = None) -> str:
        batch = self.get_batch(key)
        return generate_search_summary(query or key, batch.matches)
