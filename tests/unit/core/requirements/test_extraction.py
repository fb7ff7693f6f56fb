#!/usr/bin/env python3
"""
Unit tests for free-text requirement extraction and its fallback path.
"""

import unittest
from unittest.mock import MagicMock

from core.config_loader import NormalizerConfig
from core.requirements import (
    ExtractionCache, KeywordRequirementExtractor, RequirementExtractor,
    RequirementNormalizer, extract_with_fallback
)
from core.requirements.extraction import validate_extraction
from core.taxonomy import ProficiencyLevel
from tests.fixtures.builders import default_taxonomy

NO_WAIT = NormalizerConfig(extraction_retries=2, extraction_retry_wait_seconds=0)


class FixedExtractor(RequirementExtractor):
    """Returns a canned extraction and counts calls."""

    def __init__(self, result):
        self.result = result
        self.calls = 0

    def extract(self, query):
        self.calls += 1
        return self.result


class TestKeywordRequirementExtractor(unittest.TestCase):
    """Taxonomy-driven keyword spotting."""

    def setUp(self):
        self.extractor = KeywordRequirementExtractor(default_taxonomy())

    def test_spots_skills_and_aliases(self):
        result = self.extractor.extract("Senior React developer with k8s and Postgres, 3-5 years")
        ids = [s['skill_id'] for s in result['skills']]

        self.assertIn('react', ids)
        self.assertIn('kubernetes', ids)
        self.assertIn('postgresql', ids)
        self.assertEqual(result['level'], 'senior')
        self.assertEqual(result['experience_years'], {'min': 3.0, 'max': 5.0})
        for spotted in result['skills']:
            self.assertTrue(spotted['required'])

    def test_word_boundaries_respected(self):
        """'java' must not be spotted inside 'javascript'."""
        ids = [s['skill_id'] for s in self.extractor.extract("javascript only")['skills']]
        self.assertIn('javascript', ids)
        self.assertNotIn('java', ids)

    def test_minimum_years_phrases(self):
        self.assertEqual(self.extractor.extract("python, 4+ years")['experience_years'], {'min': 4.0})
        self.assertEqual(
            self.extractor.extract("at least 2 years with docker")['experience_years'], {'min': 2.0}
        )

    def test_nothing_found(self):
        result = self.extractor.extract("someone friendly")
        self.assertEqual(result['skills'], [])
        self.assertIsNone(result['level'])


class TestValidateExtraction(unittest.TestCase):
    """Coercion of loosely typed extractor output."""

    def test_accepts_alternative_keys(self):
        cleaned = validate_extraction({
            'skills': [{'name': 'React', 'level': 4, 'weight': 1.7, 'required': None}, 'garbage'],
            'experience': {'min': 2},
            'readinessForRotation': True,
        })
        self.assertEqual(cleaned['skills'], [{'name': 'React', 'level': 4, 'weight': 1.0}])
        self.assertEqual(cleaned['experience_years'], {'min': 2, 'max': None, 'areas': []})
        self.assertTrue(cleaned['readiness_required'])

    def test_bad_weight_dropped(self):
        cleaned = validate_extraction({'skills': [{'name': 'React', 'weight': 'heavy'}]})
        self.assertNotIn('weight', cleaned['skills'][0])

    def test_non_dict_rejected(self):
        with self.assertRaises(ValueError):
            validate_extraction(["react"])


class TestExtractWithFallback(unittest.TestCase):
    """Injected extractor, retries, keyword fallback and caching."""

    def setUp(self):
        self.taxonomy = default_taxonomy()

    def test_uses_injected_extractor(self):
        extractor = FixedExtractor({'skills': [{'name': 'Python', 'level': 5, 'weight': 0.9}]})
        result = extract_with_fallback("anything", self.taxonomy, extractor, NO_WAIT)
        self.assertEqual(result['skills'][0]['name'], 'Python')
        self.assertEqual(extractor.calls, 1)

    def test_retries_then_succeeds(self):
        extractor = MagicMock(spec=RequirementExtractor)
        extractor.extract.side_effect = [RuntimeError("timeout"), {'skills': [{'name': 'Go'}]}]

        result = extract_with_fallback("go dev", self.taxonomy, extractor, NO_WAIT)

        self.assertEqual(extractor.extract.call_count, 2)
        self.assertEqual(result['skills'], [{'name': 'Go'}])

    def test_falls_back_to_keywords_after_retries(self):
        extractor = MagicMock(spec=RequirementExtractor)
        extractor.extract.side_effect = RuntimeError("service down")

        result = extract_with_fallback("react developer", self.taxonomy, extractor, NO_WAIT)

        self.assertEqual(extractor.extract.call_count, 3)
        self.assertEqual([s['skill_id'] for s in result['skills']], ['react'])

    def test_cache_hit_skips_extractor(self):
        cache = ExtractionCache()
        extractor = FixedExtractor({'skills': [{'name': 'Docker'}]})

        extract_with_fallback("Docker   expert", self.taxonomy, extractor, NO_WAIT, cache=cache)
        extract_with_fallback("docker expert", self.taxonomy, extractor, NO_WAIT, cache=cache)

        self.assertEqual(extractor.calls, 1)
        self.assertEqual(len(cache), 1)

    def test_fallback_not_cached_so_recovered_extractor_is_used(self):
        cache = ExtractionCache()
        extractor = MagicMock(spec=RequirementExtractor)
        extractor.extract.side_effect = [
            RuntimeError("down"), RuntimeError("down"), RuntimeError("down"),
            {'skills': [{'name': 'Kotlin'}]},
        ]

        first = extract_with_fallback("react developer", self.taxonomy, extractor, NO_WAIT, cache=cache)
        self.assertEqual([s['skill_id'] for s in first['skills']], ['react'])
        self.assertEqual(len(cache), 0)

        second = extract_with_fallback("react developer", self.taxonomy, extractor, NO_WAIT, cache=cache)
        self.assertEqual(extractor.extract.call_count, 4)
        self.assertEqual(second['skills'], [{'name': 'Kotlin'}])
        self.assertEqual(len(cache), 1)


class TestNormalizerFromText(unittest.TestCase):
    """End to end: free text -> canonical requirement set."""

    def test_from_text_with_keyword_fallback(self):
        normalizer = RequirementNormalizer(default_taxonomy(), NO_WAIT)
        result = normalizer.from_text("search-1", 2, "Need a senior Python engineer with Docker, 5+ years")
        rs = result.requirement_set

        self.assertEqual(rs.id, "search-1")
        self.assertEqual(rs.version, 2)
        self.assertEqual(set(rs.skill_ids), {'python', 'docker'})
        self.assertEqual(rs.experience_years.min, 5.0)
        self.assertEqual(rs.level, 'senior')
        for requirement in rs.required_skills:
            self.assertEqual(requirement.level, ProficiencyLevel.INTERMEDIATE)


if __name__ == '__main__':
    unittest.main()
