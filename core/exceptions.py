#!/usr/bin/env python3
"""
Matching engine exceptions.

Structural problems (a malformed requirement set) are raised to the caller
before any scoring happens. Per-candidate problems are never raised; they are
collected as ComputationFailure records next to the successful results.
"""

from dataclasses import dataclass


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    pass


class ValidationError(MatchingError):
    """Raised when a requirement set is malformed or has nothing to score."""
    pass


class MatchNotFoundError(MatchingError):
    """Raised when no computed match exists for a key or candidate."""
    pass


class CacheCoordinationError(MatchingError):
    """Version conflict inside the match coordinator.

    Resolved internally by "highest version wins"; never raised to callers
    of get_or_compute.
    """
    pass


class SkillResolutionWarning(UserWarning):
    """A requirement skill name could not be resolved against the taxonomy.

    The requirement is kept as a keyword requirement with a reduced weight.
    """

    def __init__(self, name: str, message: str = ""):
        self.name = name
        super().__init__(message or f"Skill '{name}' not found in taxonomy; using keyword matching")


@dataclass(frozen=True)
class ComputationFailure:
    """A candidate that could not be scored, with the reason it was excluded."""
    candidate_id: str
    reason: str
    error_type: str = "Exception"
