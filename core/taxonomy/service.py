#!/usr/bin/env python3
"""
Skill Taxonomy - canonical skill catalogue with synonym resolution.

Resolution order for a free-form skill name:
1. exact id or canonical name (case-insensitive)
2. synonym-group alias (case-insensitive)
3. substring-tolerant match against names and aliases; the longest matching
   alias wins, ties broken by skill id
"""

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from core.taxonomy.models import Skill

logger = logging.getLogger(__name__)

# Aliases shorter than this never take part in substring matching ("js" is everywhere)
MIN_SUBSTRING_LENGTH = 3


def _norm(text: str) -> str:
    return " ".join(text.strip().lower().split())


class SkillTaxonomy:
    """
    Read-only skill catalogue.

    The related-skill graph is made symmetric on construction: if A lists B
    as related, B is related to A as well.
    """

    def __init__(
        self,
        skills: Iterable[Skill],
        synonyms: Optional[Mapping[str, Iterable[str]]] = None
    ):
        skills = list(skills)
        related: Dict[str, Set[str]] = defaultdict(set)
        ids = {s.id for s in skills}

        for skill in skills:
            for other in skill.related_skill_ids:
                if other == skill.id:
                    continue
                if other not in ids:
                    logger.debug(f"Skill {skill.id} relates to unknown skill {other}; ignoring")
                    continue
                related[skill.id].add(other)
                related[other].add(skill.id)

        self._skills: Dict[str, Skill] = {
            s.id: replace(s, related_skill_ids=frozenset(related.get(s.id, set())))
            for s in skills
        }

        # alias -> skill id; ids and canonical names are aliases of themselves
        self._aliases: Dict[str, str] = {}
        for skill in self._skills.values():
            self._aliases.setdefault(_norm(skill.id), skill.id)
            self._aliases.setdefault(_norm(skill.name), skill.id)

        for skill_id, group in (synonyms or {}).items():
            if skill_id not in self._skills:
                logger.warning(f"Synonym group for unknown skill '{skill_id}' ignored")
                continue
            for alias in group:
                key = _norm(alias)
                existing = self._aliases.get(key)
                if existing and existing != skill_id:
                    logger.warning(f"Alias '{alias}' already maps to '{existing}', not '{skill_id}'")
                    continue
                self._aliases[key] = skill_id

        logger.debug(f"Taxonomy loaded: {len(self._skills)} skills, {len(self._aliases)} aliases")

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, skill_id: str) -> bool:
        return skill_id in self._skills

    def get(self, skill_id: str) -> Optional[Skill]:
        return self._skills.get(skill_id)

    def name_of(self, skill_id: str) -> str:
        skill = self._skills.get(skill_id)
        return skill.name if skill else skill_id

    def all_skills(self) -> List[Skill]:
        return sorted(self._skills.values(), key=lambda s: s.id)

    def aliases_of(self, skill_id: str) -> List[str]:
        return sorted(alias for alias, sid in self._aliases.items() if sid == skill_id)

    def resolve(self, name: str) -> Optional[str]:
        """Resolve a free-form skill name to a skill id, or None."""
        if not name or not name.strip():
            return None
        key = _norm(name)

        if key in self._skills:
            return key
        if key in self._aliases:
            return self._aliases[key]

        if len(key) < MIN_SUBSTRING_LENGTH:
            return None

        candidates: List[Tuple[int, str]] = []
        for alias, skill_id in self._aliases.items():
            if len(alias) < MIN_SUBSTRING_LENGTH:
                continue
            if alias in key or key in alias:
                candidates.append((len(alias), skill_id))
        if not candidates:
            return None

        candidates.sort(key=lambda c: (-c[0], c[1]))
        return candidates[0][1]

    def matches_keyword(self, skill_id: str, keyword: str) -> bool:
        """True when a skill's id, name or alias contains the keyword."""
        key = _norm(keyword)
        if not key:
            return False
        if key in _norm(skill_id):
            return True
        if skill_id not in self._skills:
            return False
        return any(key in alias for alias in [_norm(self._skills[skill_id].name)] + self.aliases_of(skill_id))

    def related_skills(self, skill_id: str) -> List[Skill]:
        skill = self._skills.get(skill_id)
        if not skill:
            return []
        return [self._skills[s] for s in sorted(skill.related_skill_ids)]

    def by_category(self, category: str) -> List[Skill]:
        return [s for s in self.all_skills() if s.category == category]

    def by_competency_area(self, area: str) -> List[Skill]:
        return [s for s in self.all_skills() if s.competency_area == area]

    def core_skills(self) -> List[Skill]:
        return [s for s in self.all_skills() if s.is_core]

    def categories(self) -> Dict[str, List[Skill]]:
        hierarchy: Dict[str, List[Skill]] = defaultdict(list)
        for skill in self.all_skills():
            hierarchy[skill.category].append(skill)
        return dict(hierarchy)

    def search(self, query: str) -> List[Skill]:
        """Skills whose name, id, category or alias contains the query."""
        key = _norm(query)
        if not key:
            return []
        hits = []
        for skill in self.all_skills():
            haystack = [_norm(skill.name), skill.id, skill.category] + self.aliases_of(skill.id)
            if any(key in h for h in haystack):
                hits.append(skill)
        return hits
