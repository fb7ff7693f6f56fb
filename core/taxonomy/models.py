#!/usr/bin/env python3
"""
Taxonomy Models - skill catalogue reference data.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import FrozenSet, Union

# Gap reported for a skill the candidate does not have at all
MAX_ORDINAL_SPAN = 4

# Numeric 1-5 scale used by requirement extractors
_NUMERIC_LEVELS = {1: 1, 2: 1, 3: 2, 4: 3, 5: 4}


class ProficiencyLevel(IntEnum):
    """Ordered proficiency levels; only the ordering carries meaning."""
    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    EXPERT = 4

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Union[str, int, "ProficiencyLevel"]) -> "ProficiencyLevel":
        """Parse a level name ('advanced') or an extractor's 1-5 number."""
        if isinstance(value, ProficiencyLevel):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid proficiency level: {value!r}")
        if isinstance(value, (int, float)):
            number = int(round(value))
            if number not in _NUMERIC_LEVELS:
                raise ValueError(f"Numeric proficiency level must be 1-5, got {value!r}")
            return cls(_NUMERIC_LEVELS[number])
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls.parse(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"Unknown proficiency level: {value!r}") from None
        raise ValueError(f"Invalid proficiency level: {value!r}")


@dataclass(frozen=True)
class Skill:
    """Canonical skill entry. Immutable reference data owned by the taxonomy."""
    id: str
    name: str
    category: str = "other"
    competency_area: str = "technical"
    is_core: bool = False
    related_skill_ids: FrozenSet[str] = field(default_factory=frozenset)
