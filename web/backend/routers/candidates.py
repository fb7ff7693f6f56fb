#!/usr/bin/env python3
"""
Candidate endpoints - profile change notifications.
"""

import logging
from fastapi import APIRouter, Depends

from core.engine import MatchingEngine
from ..dependencies import get_engine
from ..services.match_service import MatchService
from ..models.requests import CandidateUpdateRequest
from ..models.responses import InvalidateResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/candidates", tags=["candidates"])


@router.post("/{candidate_id}/updated", response_model=InvalidateResponse)
def candidate_updated(
    candidate_id: str,
    request: CandidateUpdateRequest,
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Report a profile change.

    Every cached match list that scored this candidate, and whose
    requirements touch one of the changed skills, is invalidated.
    """
    return MatchService(engine).candidate_updated(candidate_id, request.skill_ids)
