"""Requirements Module - drafts, canonical requirement sets and their normalization."""
from core.requirements.models import (
    DraftSkill, DraftExperience, RequirementSetDraft,
    RequiredSkill, ExperienceRange, RequirementSet
)
from core.requirements.extraction import (
    RequirementExtractor, KeywordRequirementExtractor, ExtractionCache, extract_with_fallback
)
from core.requirements.normalizer import RequirementNormalizer, NormalizationResult

__all__ = [
    'DraftSkill', 'DraftExperience', 'RequirementSetDraft',
    'RequiredSkill', 'ExperienceRange', 'RequirementSet',
    'RequirementExtractor', 'KeywordRequirementExtractor', 'ExtractionCache', 'extract_with_fallback',
    'RequirementNormalizer', 'NormalizationResult'
]
