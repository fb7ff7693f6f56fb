#!/usr/bin/env python3
"""
Unit tests for the skill taxonomy: levels, resolution and catalogue queries.
"""

import os
import tempfile
import unittest

from core.taxonomy import (
    ProficiencyLevel, Skill, SkillTaxonomy, load_taxonomy, taxonomy_from_dict
)


class TestProficiencyLevel(unittest.TestCase):
    """Level parsing from names and the extractor's 1-5 scale."""

    def test_parse_names_case_insensitive(self):
        self.assertEqual(ProficiencyLevel.parse("advanced"), ProficiencyLevel.ADVANCED)
        self.assertEqual(ProficiencyLevel.parse(" Expert "), ProficiencyLevel.EXPERT)

    def test_parse_numeric_scale(self):
        """1 and 2 collapse to beginner; 5 is expert."""
        self.assertEqual(ProficiencyLevel.parse(1), ProficiencyLevel.BEGINNER)
        self.assertEqual(ProficiencyLevel.parse(2), ProficiencyLevel.BEGINNER)
        self.assertEqual(ProficiencyLevel.parse(3), ProficiencyLevel.INTERMEDIATE)
        self.assertEqual(ProficiencyLevel.parse("4"), ProficiencyLevel.ADVANCED)
        self.assertEqual(ProficiencyLevel.parse(5), ProficiencyLevel.EXPERT)

    def test_parse_rejects_unknown(self):
        with self.assertRaises(ValueError):
            ProficiencyLevel.parse("guru")
        with self.assertRaises(ValueError):
            ProficiencyLevel.parse(9)
        with self.assertRaises(ValueError):
            ProficiencyLevel.parse(True)

    def test_ordering_and_label(self):
        self.assertLess(ProficiencyLevel.BEGINNER, ProficiencyLevel.EXPERT)
        self.assertEqual(ProficiencyLevel.INTERMEDIATE.label, "intermediate")


class TestSkillTaxonomy(unittest.TestCase):
    """Resolution and queries against a small hand-built taxonomy."""

    def setUp(self):
        self.taxonomy = SkillTaxonomy(
            [
                Skill("react", "React", category="web", is_core=True, related_skill_ids=frozenset({"javascript"})),
                Skill("javascript", "JavaScript", category="programming", is_core=True),
                Skill("java", "Java", category="programming"),
                Skill("leadership", "Leadership", category="leadership", competency_area="leadership"),
            ],
            synonyms={
                "react": ["reactjs", "react.js"],
                "javascript": ["js"],
                "ghost": ["boo"],
            }
        )

    def test_resolve_exact_alias_and_substring(self):
        self.assertEqual(self.taxonomy.resolve("react"), "react")
        self.assertEqual(self.taxonomy.resolve("ReactJS"), "react")
        self.assertEqual(self.taxonomy.resolve("JavaScript"), "javascript")
        self.assertEqual(self.taxonomy.resolve("js"), "javascript")
        self.assertEqual(self.taxonomy.resolve("senior react.js developer"), "react")

    def test_resolve_prefers_longest_alias(self):
        """'javascript' contains 'java'; the longer alias wins."""
        self.assertEqual(self.taxonomy.resolve("modern javascript"), "javascript")
        self.assertEqual(self.taxonomy.resolve("java backend"), "java")

    def test_resolve_unknown_returns_none(self):
        self.assertIsNone(self.taxonomy.resolve("cobol"))
        self.assertIsNone(self.taxonomy.resolve(""))
        self.assertIsNone(self.taxonomy.resolve("   "))

    def test_related_graph_is_symmetric(self):
        self.assertIn("javascript", self.taxonomy.get("react").related_skill_ids)
        self.assertIn("react", self.taxonomy.get("javascript").related_skill_ids)
        self.assertEqual([s.id for s in self.taxonomy.related_skills("javascript")], ["react"])

    def test_synonyms_for_unknown_skill_ignored(self):
        self.assertIsNone(self.taxonomy.resolve("boo"))

    def test_catalogue_queries(self):
        self.assertEqual(len(self.taxonomy), 4)
        self.assertIn("java", self.taxonomy)
        self.assertEqual([s.id for s in self.taxonomy.by_category("programming")], ["java", "javascript"])
        self.assertEqual([s.id for s in self.taxonomy.by_competency_area("leadership")], ["leadership"])
        self.assertEqual([s.id for s in self.taxonomy.core_skills()], ["javascript", "react"])
        self.assertEqual(sorted(self.taxonomy.categories().keys()), ["leadership", "programming", "web"])
        self.assertEqual([s.id for s in self.taxonomy.search("js")], ["javascript", "react"])

    def test_matches_keyword(self):
        self.assertTrue(self.taxonomy.matches_keyword("react", "react"))
        self.assertTrue(self.taxonomy.matches_keyword("javascript", "script"))
        self.assertFalse(self.taxonomy.matches_keyword("java", "react"))

    def test_name_of_falls_back_to_id(self):
        self.assertEqual(self.taxonomy.name_of("react"), "React")
        self.assertEqual(self.taxonomy.name_of("unknown"), "unknown")


class TestTaxonomyLoader(unittest.TestCase):
    """Loading taxonomies from YAML."""

    def test_default_taxonomy_loads(self):
        taxonomy = load_taxonomy()
        self.assertIn("react", taxonomy)
        self.assertEqual(taxonomy.resolve("k8s"), "kubernetes")
        self.assertEqual(taxonomy.resolve("postgres"), "postgresql")

    def test_load_from_file(self):
        content = """
skills:
  - {id: Go, name: Go, category: programming, related: [docker]}
  - {id: docker, name: Docker, category: devops}
synonyms:
  go: [golang]
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(content)
            path = f.name
        try:
            taxonomy = load_taxonomy(path)
            self.assertEqual(taxonomy.resolve("golang"), "go")
            self.assertIn("go", taxonomy.get("docker").related_skill_ids)
        finally:
            os.unlink(path)

    def test_entry_without_id_rejected(self):
        with self.assertRaises(ValueError):
            taxonomy_from_dict({"skills": [{"name": "Nameless"}]})


if __name__ == '__main__':
    unittest.main()
