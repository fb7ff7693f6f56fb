#!/usr/bin/env python3
"""
Taxonomy endpoints - browse the skill catalogue.
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from core.engine import MatchingEngine
from core.taxonomy import Skill
from ..dependencies import get_engine

router = APIRouter(prefix="/api/taxonomy", tags=["taxonomy"])


def _skill_dict(skill: Skill, engine: MatchingEngine) -> Dict[str, Any]:
    return {
        "id": skill.id,
        "name": skill.name,
        "category": skill.category,
        "competency_area": skill.competency_area,
        "is_core": skill.is_core,
        "related_skill_ids": sorted(skill.related_skill_ids),
        "aliases": engine.taxonomy.aliases_of(skill.id),
    }


@router.get("/skills")
def list_skills(
    q: Optional[str] = Query(default=None, description="Search by name or alias"),
    category: Optional[str] = Query(default=None),
    competency_area: Optional[str] = Query(default=None),
    core_only: bool = Query(default=False),
    engine: MatchingEngine = Depends(get_engine)
):
    """
    List skills, optionally filtered. Filters combine with AND.
    """
    taxonomy = engine.taxonomy
    skills: List[Skill] = taxonomy.search(q) if q else taxonomy.all_skills()
    if category:
        skills = [s for s in skills if s.category == category]
    if competency_area:
        skills = [s for s in skills if s.competency_area == competency_area]
    if core_only:
        skills = [s for s in skills if s.is_core]

    return {
        "success": True,
        "count": len(skills),
        "skills": [_skill_dict(s, engine) for s in skills]
    }


@router.get("/skills/{skill_id}/related")
def related_skills(
    skill_id: str,
    engine: MatchingEngine = Depends(get_engine)
):
    """
    Skills related to skill_id in the synonym/relation graph.
    """
    if skill_id not in engine.taxonomy:
        raise HTTPException(status_code=404, detail=f"Unknown skill: {skill_id}")
    related = engine.taxonomy.related_skills(skill_id)
    return {
        "success": True,
        "skill_id": skill_id,
        "related": [_skill_dict(s, engine) for s in related]
    }
