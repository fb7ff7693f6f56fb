#!/usr/bin/env python3
"""
Unit tests for RequirementNormalizer.
"""

import unittest

from core.config_loader import NormalizerConfig
from core.exceptions import ValidationError
from core.requirements import RequirementNormalizer, RequirementSetDraft
from core.taxonomy import ProficiencyLevel
from tests.fixtures.builders import default_taxonomy


class TestRequirementNormalizer(unittest.TestCase):
    """Draft -> canonical RequirementSet."""

    def setUp(self):
        self.normalizer = RequirementNormalizer(default_taxonomy(), NormalizerConfig())

    def _draft(self, **fields):
        fields.setdefault('id', 'vacancy-1')
        fields.setdefault('version', 1)
        return RequirementSetDraft(**fields)

    def test_resolves_names_and_synonyms(self):
        result = self.normalizer.normalize(self._draft(skills=[
            {'name': 'ReactJS', 'level': 'advanced', 'weight': 0.8},
            {'name': 'postgres', 'level': 3, 'weight': 0.4, 'required': False},
        ]))
        rs = result.requirement_set

        self.assertEqual(rs.skill_ids, ['react', 'postgresql'])
        react, postgres = rs.required_skills
        self.assertEqual(react.level, ProficiencyLevel.ADVANCED)
        self.assertEqual(react.name, 'React')
        self.assertFalse(react.is_keyword)
        self.assertEqual(postgres.level, ProficiencyLevel.INTERMEDIATE)
        self.assertFalse(postgres.required)
        self.assertEqual(result.warnings, [])

    def test_critical_defaults_from_weight(self):
        rs = self.normalizer.normalize(self._draft(skills=[
            {'skill_id': 'react', 'weight': 0.8},
            {'skill_id': 'docker', 'weight': 0.5},
            {'skill_id': 'git', 'weight': 0.2, 'is_critical': True},
        ])).requirement_set
        critical = {r.skill_id: r.is_critical for r in rs.required_skills}
        self.assertEqual(critical, {'react': True, 'docker': False, 'git': True})

    def test_unresolved_skill_kept_as_keyword_with_penalty(self):
        result = self.normalizer.normalize(self._draft(skills=[
            {'name': 'COBOL', 'level': 'advanced', 'weight': 0.6},
        ]))
        requirement = result.requirement_set.required_skills[0]

        self.assertTrue(requirement.is_keyword)
        self.assertEqual(requirement.skill_id, 'cobol')
        self.assertEqual(requirement.display_name, 'COBOL')
        self.assertAlmostEqual(requirement.weight, 0.3)
        self.assertEqual(result.unresolved, ['COBOL'])

    def test_duplicates_merge_to_stricter_requirement(self):
        rs = self.normalizer.normalize(self._draft(skills=[
            {'name': 'react', 'level': 'intermediate', 'weight': 0.9, 'required': False},
            {'name': 'React.js', 'level': 'expert', 'weight': 0.4, 'required': True},
        ])).requirement_set

        self.assertEqual(len(rs.required_skills), 1)
        merged = rs.required_skills[0]
        self.assertEqual(merged.level, ProficiencyLevel.EXPERT)
        self.assertAlmostEqual(merged.weight, 0.9)
        self.assertTrue(merged.required)
        self.assertTrue(merged.is_critical)

    def test_keywords_become_preferred_requirements(self):
        rs = self.normalizer.normalize(self._draft(
            skills=[{'skill_id': 'react', 'weight': 0.8}],
            keywords=['react', 'docker', 'blockchain'],
        )).requirement_set

        by_id = {r.skill_id: r for r in rs.required_skills}
        self.assertEqual(set(by_id), {'react', 'docker', 'blockchain'})
        self.assertAlmostEqual(by_id['react'].weight, 0.8)
        self.assertFalse(by_id['docker'].required)
        self.assertAlmostEqual(by_id['docker'].weight, 0.3)
        self.assertEqual(by_id['docker'].level, ProficiencyLevel.BEGINNER)
        self.assertTrue(by_id['blockchain'].is_keyword)
        self.assertAlmostEqual(by_id['blockchain'].weight, 0.15)

    def test_experience_range_and_metadata_carried(self):
        rs = self.normalizer.normalize(self._draft(
            skills=[{'skill_id': 'python'}],
            experience_years={'min': 2, 'max': 6, 'areas': ['backend']},
            department='Data',
            level='senior',
            readiness_required=True,
        )).requirement_set

        self.assertEqual(rs.experience_years.min, 2)
        self.assertEqual(rs.experience_years.max, 6)
        self.assertEqual(rs.experience_areas, ('backend',))
        self.assertEqual(rs.department, 'Data')
        self.assertEqual(rs.level, 'senior')
        self.assertTrue(rs.readiness_required)
        self.assertEqual(rs.version, 1)

    def test_missing_min_defaults_to_zero(self):
        rs = self.normalizer.normalize(self._draft(skills=[{'skill_id': 'python'}])).requirement_set
        self.assertEqual(rs.experience_years.min, 0.0)
        self.assertIsNone(rs.experience_years.max)

    def test_reversed_experience_range_rejected(self):
        with self.assertRaises(ValidationError):
            self.normalizer.normalize(self._draft(
                skills=[{'skill_id': 'python'}],
                experience_years={'min': 8, 'max': 3},
            ))

    def test_empty_requirement_set_rejected(self):
        with self.assertRaises(ValidationError):
            self.normalizer.normalize(self._draft())
        with self.assertRaises(ValidationError):
            self.normalizer.normalize(self._draft(skills=[{'name': '  '}]))

    def test_invalid_level_rejected(self):
        with self.assertRaises(ValidationError):
            self.normalizer.normalize(self._draft(skills=[{'skill_id': 'python', 'level': 'wizard'}]))

    def test_unleveled_skill_gets_configured_default(self):
        draft = self._draft(skills=[{'skill_id': 'python'}, {'skill_id': 'docker', 'level': 'beginner'}])

        python, docker = self.normalizer.normalize(draft).requirement_set.required_skills
        self.assertEqual(python.level, ProficiencyLevel.INTERMEDIATE)

        strict = RequirementNormalizer(default_taxonomy(), NormalizerConfig(default_level="advanced"))
        python, docker = strict.normalize(draft).requirement_set.required_skills
        self.assertEqual(python.level, ProficiencyLevel.ADVANCED)
        self.assertEqual(docker.level, ProficiencyLevel.BEGINNER)

    def test_normalization_is_deterministic(self):
        draft = self._draft(skills=[
            {'name': 'js', 'weight': 0.7},
            {'name': 'kubernetes', 'weight': 0.3},
        ], keywords=['aws'])
        self.assertEqual(
            self.normalizer.normalize(draft).requirement_set,
            self.normalizer.normalize(draft).requirement_set
        )


if __name__ == '__main__':
    unittest.main()
