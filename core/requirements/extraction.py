#!/usr/bin/env python3
"""
Requirement Extraction - free-text queries to structured requirement drafts.

The language-model extractor itself lives outside the engine; it is injected
as a RequirementExtractor. When it fails (after retries) the taxonomy-driven
KeywordRequirementExtractor takes over so a query never yields nothing just
because the remote service is down.
"""

import re
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from tenacity import Retrying, stop_after_attempt, wait_fixed, retry_if_exception_type

from core.config_loader import NormalizerConfig
from core.requirements.models import SENIORITY_LEVELS
from core.taxonomy import SkillTaxonomy

logger = logging.getLogger(__name__)

# Weight and 1-5 level given to skills spotted by keyword
FALLBACK_SKILL_WEIGHT = 0.7
FALLBACK_SKILL_LEVEL = 3

_MIN_YEARS_PATTERNS = [
    r'(\d+(?:\.\d+)?)\s*\+\s*(?:years?|yrs?)',
    r'(?:at\s+least|minimum(?:\s+of)?|min\.?)\s+(\d+(?:\.\d+)?)\s*(?:years?|yrs?)',
    r'(\d+(?:\.\d+)?)\s*(?:-|to)\s*\d+(?:\.\d+)?\s*(?:years?|yrs?)',
    r'(\d+(?:\.\d+)?)\s*(?:years?|yrs?)\s+(?:of\s+)?experience',
]
_MAX_YEARS_PATTERN = r'\d+(?:\.\d+)?\s*(?:-|to)\s*(\d+(?:\.\d+)?)\s*(?:years?|yrs?)'


class RequirementExtractor(ABC):
    """
    Abstract interface for free-text requirement extraction (LLM or otherwise).
    """

    @abstractmethod
    def extract(self, query: str) -> Dict[str, Any]:
        """
        Extract structured requirements from a recruiter's free-text query.

        Returns a dictionary with keys:
        - skills: list of {name, level (1-5 or level name), required, weight}
        - experience_years (or experience): {min, max, areas}
        - department, position, level, readiness_required: optional hints
        - keywords: list of strings
        """
        pass


class KeywordRequirementExtractor(RequirementExtractor):
    """Spots taxonomy skill names and aliases in the query text."""

    def __init__(self, taxonomy: SkillTaxonomy):
        self.taxonomy = taxonomy
        self._patterns: List[Tuple[str, re.Pattern]] = []
        for skill in taxonomy.all_skills():
            for alias in sorted({skill.name.lower(), skill.id} | set(taxonomy.aliases_of(skill.id))):
                if len(alias) < 2:
                    continue
                pattern = re.compile(r'(?<![\w.#+])' + re.escape(alias) + r'(?![\w#+])', re.IGNORECASE)
                self._patterns.append((skill.id, pattern))

    def extract(self, query: str) -> Dict[str, Any]:
        text = query or ""
        found: List[str] = []
        for skill_id, pattern in self._patterns:
            if skill_id not in found and pattern.search(text):
                found.append(skill_id)

        skills = [
            {
                'skill_id': skill_id,
                'name': self.taxonomy.name_of(skill_id),
                'level': FALLBACK_SKILL_LEVEL,
                'required': True,
                'weight': FALLBACK_SKILL_WEIGHT,
            }
            for skill_id in found
        ]

        lower = text.lower()
        level = next((w for w in SENIORITY_LEVELS if re.search(r'\b' + w + r'\b', lower)), None)

        return {
            'skills': skills,
            'experience_years': _extract_years_range(lower),
            'level': level,
            'keywords': [self.taxonomy.name_of(s).lower() for s in found],
        }


def _extract_years_range(text: str) -> Dict[str, Optional[float]]:
    result: Dict[str, Optional[float]] = {}
    for pattern in _MIN_YEARS_PATTERNS:
        match = re.search(pattern, text)
        if match:
            result['min'] = float(match.group(1))
            break
    match = re.search(_MAX_YEARS_PATTERN, text)
    if match:
        result['max'] = float(match.group(1))
    return result


def validate_extraction(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce an extractor's loosely-typed output into RequirementSetDraft fields."""
    if not isinstance(raw, dict):
        raise ValueError(f"Extractor returned {type(raw).__name__}, expected dict")

    experience = raw.get('experience_years') or raw.get('experience') or {}
    if not isinstance(experience, dict):
        experience = {}

    readiness = raw.get('readiness_required')
    if readiness is None:
        readiness = raw.get('readinessForRotation')

    skills = raw.get('skills') if isinstance(raw.get('skills'), list) else []
    keywords = raw.get('keywords') if isinstance(raw.get('keywords'), list) else []

    cleaned_skills = []
    for skill in skills:
        if not isinstance(skill, dict):
            continue
        skill = {k: v for k, v in skill.items() if v is not None}
        if 'weight' in skill:
            try:
                skill['weight'] = max(0.0, min(1.0, float(skill['weight'])))
            except (TypeError, ValueError):
                logger.warning(f"Invalid extracted weight {skill['weight']!r}; using default")
                del skill['weight']
        cleaned_skills.append(skill)

    return {
        'skills': cleaned_skills,
        'experience_years': {
            'min': experience.get('min'),
            'max': experience.get('max'),
            'areas': experience.get('areas') or [],
        },
        'department': raw.get('department'),
        'position': raw.get('position'),
        'level': raw.get('level'),
        'readiness_required': readiness,
        'keywords': [str(k) for k in keywords],
    }


class ExtractionCache:
    """Thread-safe cache of extractions keyed by normalised query text."""

    def __init__(self):
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(query: str) -> str:
        return " ".join((query or "").lower().split())

    def get(self, query: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._entries.get(self.key(query))

    def set(self, query: str, extracted: Dict[str, Any]) -> None:
        with self._lock:
            self._entries[self.key(query)] = extracted

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def extract_with_fallback(
    query: str,
    taxonomy: SkillTaxonomy,
    extractor: Optional[RequirementExtractor],
    config: NormalizerConfig,
    cache: Optional[ExtractionCache] = None
) -> Dict[str, Any]:
    """Run the injected extractor with retries, falling back to keyword spotting.

    Only successful extractor results are cached. Keyword fallbacks are cheap
    and never cached, so once a failing extractor recovers the next call for
    the same query reaches it.
    """
    if cache is not None:
        cached = cache.get(query)
        if cached is not None:
            logger.debug(f"Extraction cache hit for query '{query[:40]}'")
            return cached

    extracted = None
    cacheable = False
    if extractor is not None:
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(max(1, config.extraction_retries + 1)),
                wait=wait_fixed(config.extraction_retry_wait_seconds),
                retry=retry_if_exception_type(Exception),
                reraise=True
            ):
                with attempt:
                    extracted = validate_extraction(extractor.extract(query))
            cacheable = True
        except Exception as e:
            logger.error(f"Requirement extraction failed, using keyword fallback: {e}")
            extracted = None

    if extracted is None:
        extracted = validate_extraction(KeywordRequirementExtractor(taxonomy).extract(query))

    if cache is not None and cacheable:
        cache.set(query, extracted)
    return extracted
