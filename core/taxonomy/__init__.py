"""Taxonomy Module - skill catalogue, proficiency levels and synonym groups."""
from core.taxonomy.models import Skill, ProficiencyLevel, MAX_ORDINAL_SPAN
from core.taxonomy.service import SkillTaxonomy
from core.taxonomy.loader import load_taxonomy, taxonomy_from_dict, DEFAULT_TAXONOMY_PATH

__all__ = [
    'Skill', 'ProficiencyLevel', 'MAX_ORDINAL_SPAN',
    'SkillTaxonomy', 'load_taxonomy', 'taxonomy_from_dict', 'DEFAULT_TAXONOMY_PATH'
]
