#!/usr/bin/env python3
"""
Match endpoints - compute, read and invalidate ranked candidate matches.
"""

import logging
from fastapi import APIRouter, Depends, Query

from core.engine import MatchingEngine
from ..dependencies import get_engine
from ..services.match_service import MatchService
from ..models.requests import MatchRequest
from ..models.responses import (
    ExplanationResponse,
    InvalidateResponse,
    MatchesResponse,
    VacancyReportResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.post("/{key}", response_model=MatchesResponse)
def compute_matches(
    key: str,
    request: MatchRequest,
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Get the ranked matches for a requirement set, computing them if needed.

    Repeating a request with the same version is served from the cache;
    concurrent identical requests share one computation. Bump the version
    (or set force) after the requirements or the candidate pool change.
    """
    logger.info(f"Match request for {key} v{request.version} with {len(request.candidates)} candidates")
    return MatchService(engine).compute(key, request)


@router.get("/{key}", response_model=MatchesResponse)
def get_matches(
    key: str,
    details: bool = Query(default=False, description="Include skill matches and explanations"),
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Get the last computed matches for a requirement set.

    Returns 404 when nothing has been computed for the key.
    """
    return MatchService(engine).get_matches(key, include_details=details)


@router.get("/{key}/explanation/{candidate_id}", response_model=ExplanationResponse)
def get_explanation(
    key: str,
    candidate_id: str,
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Get the explanation for one candidate, served from the cached result.
    """
    return MatchService(engine).get_explanation(key, candidate_id)


@router.get("/{key}/report", response_model=VacancyReportResponse)
def get_report(
    key: str,
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Get an aggregate vacancy report: ready count, average score, top
    candidates and per-skill gap counts.
    """
    return MatchService(engine).get_report(key)


@router.delete("/{key}", response_model=InvalidateResponse)
def invalidate_matches(
    key: str,
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Drop the cached matches for a requirement set.
    """
    return MatchService(engine).invalidate(key)
