"""Load a SkillTaxonomy from YAML."""
import os
import logging
from typing import Any, Dict, Optional

import yaml

from core.taxonomy.models import Skill
from core.taxonomy.service import SkillTaxonomy

logger = logging.getLogger(__name__)

DEFAULT_TAXONOMY_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "default_taxonomy.yaml")


def taxonomy_from_dict(data: Dict[str, Any]) -> SkillTaxonomy:
    """
    Build a taxonomy from a mapping shaped like:

        skills:
          - id: react
            name: React
            category: web
            competency_area: technical
            is_core: true
            related: [javascript, typescript]
        synonyms:
          react: [reactjs, react.js]
    """
    skills = []
    for entry in data.get("skills") or []:
        if "id" not in entry:
            raise ValueError(f"Taxonomy skill entry without id: {entry!r}")
        skills.append(Skill(
            id=str(entry["id"]).strip().lower(),
            name=entry.get("name") or entry["id"],
            category=entry.get("category", "other"),
            competency_area=entry.get("competency_area", "technical"),
            is_core=bool(entry.get("is_core", False)),
            related_skill_ids=frozenset(str(r).strip().lower() for r in entry.get("related") or [])
        ))

    synonyms = {
        str(skill_id).strip().lower(): [str(a) for a in aliases or []]
        for skill_id, aliases in (data.get("synonyms") or {}).items()
    }
    return SkillTaxonomy(skills, synonyms)


def load_taxonomy(path: Optional[str] = None) -> SkillTaxonomy:
    """Load the taxonomy YAML at path, or the bundled default."""
    path = path or DEFAULT_TAXONOMY_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    taxonomy = taxonomy_from_dict(data)
    logger.info(f"Loaded {len(taxonomy)} skills from {path}")
    return taxonomy
