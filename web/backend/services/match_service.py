#!/usr/bin/env python3
"""
Match service - business logic for candidate match operations.
"""

import logging
from typing import List, Optional

from core.config_loader import ResultPolicy
from core.engine import MatchingEngine
from core.exceptions import ValidationError
from core.matcher.models import Candidate, SkillMatch
from core.reporting import generate_search_summary
from core.requirements import RequirementSetDraft
from core.scorer.models import CandidateMatch, MatchBatch, MatchExplanation
from ..models.requests import MatchRequest
from ..models.responses import (
    CandidateMatchSummary,
    ExplanationDetail,
    ExplanationResponse,
    FailureDetail,
    InvalidateResponse,
    MatchesResponse,
    SkillGapDetail,
    SkillMatchDetail,
    VacancyReportResponse
)

logger = logging.getLogger(__name__)


def _skill_match_detail(skill_match: SkillMatch) -> SkillMatchDetail:
    return SkillMatchDetail(
        skill_id=skill_match.skill_id,
        skill_name=skill_match.skill_name,
        category=skill_match.category,
        required=skill_match.required,
        is_critical=skill_match.is_critical,
        required_level=skill_match.required_level.label,
        candidate_level=skill_match.candidate_level.label if skill_match.candidate_level else None,
        gap=skill_match.gap,
        weight=skill_match.weight,
        contribution=round(skill_match.contribution, 2),
        overqualified=skill_match.overqualified
    )


def explanation_detail(explanation: MatchExplanation) -> ExplanationDetail:
    return ExplanationDetail(
        strengths=explanation.strengths,
        gaps=explanation.gaps,
        development_path=explanation.development_path,
        risk_factors=explanation.risk_factors,
        recommendations=explanation.recommendations,
        estimated_readiness_months=explanation.estimated_readiness_months,
        time_to_ready=explanation.time_to_ready,
        confidence=explanation.confidence,
        advisory_only=explanation.advisory_only
    )


def match_summary(match: CandidateMatch, include_details: bool = True) -> CandidateMatchSummary:
    return CandidateMatchSummary(
        candidate_id=match.candidate_id,
        requirement_set_id=match.requirement_set_id,
        requirement_version=match.requirement_version,
        overall_score=match.overall_score,
        readiness_level=match.readiness_level.value,
        sub_scores=match.sub_scores.as_dict(),
        skill_matches=[_skill_match_detail(m) for m in match.skill_matches] if include_details else [],
        explanation=explanation_detail(match.explanation) if include_details else None,
        computed_at=match.computed_at.isoformat()
    )


class MatchService:
    """Service for computing and reading candidate matches."""

    def __init__(self, engine: MatchingEngine):
        self.engine = engine

    def _policy(self, request: MatchRequest) -> ResultPolicy:
        overrides = {}
        if request.min_score is not None:
            overrides['min_score_threshold'] = request.min_score
        if request.top_k is not None:
            overrides['top_k'] = request.top_k
        if request.include_not_ready is not None:
            overrides['include_not_ready'] = request.include_not_ready
        return self.engine.config.result_policy.model_copy(update=overrides)

    def _candidates(self, request: MatchRequest) -> List[Candidate]:
        candidates = []
        for payload in request.candidates:
            try:
                candidates.append(Candidate.from_dict(payload.model_dump()))
            except ValueError as e:
                raise ValidationError(f"Candidate {payload.id}: {e}")
        return candidates

    def _response(
        self,
        batch: MatchBatch,
        include_details: bool = True,
        unresolved: Optional[List[str]] = None,
        summary: Optional[str] = None
    ) -> MatchesResponse:
        return MatchesResponse(
            success=True,
            requirement_set_id=batch.requirement_set_id,
            version=batch.version,
            state=self.engine.state(batch.requirement_set_id).value,
            count=len(batch.matches),
            matches=[match_summary(m, include_details) for m in batch.matches],
            failures=[
                FailureDetail(candidate_id=f.candidate_id, reason=f.reason, error_type=f.error_type)
                for f in batch.failures
            ],
            unresolved_skills=unresolved or [],
            summary=summary,
            computed_at=batch.computed_at.isoformat()
        )

    def compute(self, key: str, request: MatchRequest) -> MatchesResponse:
        """
        Normalize the requirements and return the ranked matches for this version.

        Raises:
            ValidationError: neither requirements nor query given, a malformed
                candidate, or a requirement set with nothing to score.
        """
        if request.requirements is not None:
            draft = RequirementSetDraft(
                id=key,
                version=request.version,
                **request.requirements.model_dump()
            )
            normalized = self.engine.normalize(draft)
        elif request.query:
            normalized = self.engine.from_text(key, request.version, request.query)
        else:
            raise ValidationError("Either 'requirements' or 'query' is required")

        ranked = self.engine.get_or_compute(
            normalized.requirement_set,
            self._candidates(request),
            force=request.force,
            result_policy=ResultPolicy()
        )
        summary = generate_search_summary(request.query or key, ranked.matches)
        batch = self.engine.apply_policy(ranked, self._policy(request))
        return self._response(batch, unresolved=normalized.unresolved, summary=summary)

    def get_matches(self, key: str, include_details: bool = False) -> MatchesResponse:
        batch = self.engine.apply_policy(self.engine.get_batch(key))
        return self._response(batch, include_details=include_details)

    def get_explanation(self, key: str, candidate_id: str) -> ExplanationResponse:
        explanation = self.engine.explain(candidate_id, key)
        return ExplanationResponse(
            success=True,
            requirement_set_id=key,
            candidate_id=candidate_id,
            explanation=explanation_detail(explanation)
        )

    def get_report(self, key: str) -> VacancyReportResponse:
        report = self.engine.report(key)
        return VacancyReportResponse(
            success=True,
            requirement_set_id=report.requirement_set_id,
            version=report.version,
            total_candidates=report.total_candidates,
            ready_candidates=report.ready_candidates,
            average_score=report.average_score,
            failed_candidates=report.failed_candidates,
            top_candidates=[match_summary(m, include_details=False) for m in report.top_candidates],
            skill_gaps=[
                SkillGapDetail(
                    skill_id=g.skill_id,
                    skill_name=g.skill_name,
                    required=g.required,
                    missing=g.missing,
                    insufficient=g.insufficient
                )
                for g in report.skill_gaps
            ],
            generated_at=report.generated_at.isoformat()
        )

    def invalidate(self, key: str) -> InvalidateResponse:
        had_value = self.engine.invalidate(key)
        return InvalidateResponse(
            success=True,
            invalidated=[key] if had_value else [],
            message=f"Invalidated matches for {key}" if had_value else f"No cached matches for {key}"
        )

    def candidate_updated(self, candidate_id: str, skill_ids: Optional[List[str]]) -> InvalidateResponse:
        keys = self.engine.invalidate_candidate(candidate_id, skill_ids)
        return InvalidateResponse(
            success=True,
            invalidated=keys,
            message=f"{len(keys)} match lists invalidated for {candidate_id}"
        )
