"""Matcher Module - candidate snapshots and skill gap evaluation."""
from core.matcher.models import (
    Candidate, CandidateSkill, ExperienceRecord, SkillMatch, SkillEvaluation
)
from core.matcher.skill_evaluator import SkillMatchEvaluator

__all__ = [
    'SkillMatchEvaluator',
    'Candidate', 'CandidateSkill', 'ExperienceRecord', 'SkillMatch', 'SkillEvaluation'
]
