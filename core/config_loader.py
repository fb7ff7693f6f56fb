import yaml
import os
import logging
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)


class ScoringWeights(BaseModel):
    """Weights of the five sub-scores in the overall score."""
    skills: float = 0.40
    experience: float = 0.25
    readiness: float = 0.15
    cultural: float = 0.10
    growth: float = 0.10

    @field_validator("skills", "experience", "readiness", "cultural", "growth")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("sub-score weights must be >= 0")
        return value

    @model_validator(mode="after")
    def _warn_on_sum(self) -> "ScoringWeights":
        total = self.skills + self.experience + self.readiness + self.cultural + self.growth
        if abs(total - 1.0) > 1e-6:
            logger.warning(f"Scoring weights sum to {total:.3f}, not 1.0; overall scores will be clamped")
        return self


class SkillMatchConfig(BaseModel):
    """
    Configuration for the Skill Match Evaluator.

    Contribution of one requirement:
      at/above bar: weight * base_unit * min(cand - req + 1, overqualification_cap_levels)
      below bar:    weight * base_unit / 2 * cand / req
      absent:       -critical_penalty or -minor_penalty
    """
    base_unit: float = 20.0
    endorsement_bonus: float = 1.1
    recency_bonus: float = 1.05
    recency_months: int = 12
    critical_penalty: float = 10.0
    minor_penalty: float = 5.0
    # Levels above the requirement that still earn extra contribution (1 = meets bar, 2 = one level above)
    overqualification_cap_levels: int = 2

    @field_validator("base_unit")
    @classmethod
    def _positive_base_unit(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("base_unit must be > 0")
        return value

    @field_validator("endorsement_bonus", "recency_bonus")
    @classmethod
    def _bonus_at_least_one(cls, value: float) -> float:
        if value < 1.0:
            raise ValueError("bonus multipliers must be >= 1.0")
        return value

    @field_validator("overqualification_cap_levels")
    @classmethod
    def _cap_at_least_one(cls, value: int) -> int:
        if value < 1:
            raise ValueError("overqualification_cap_levels must be >= 1")
        return value


class ReadinessThresholds(BaseModel):
    """Overall score thresholds for the readiness buckets."""
    ready: int = 80
    developing: int = 60


class ScorerConfig(BaseModel):
    """
    Configuration for the Multi-Factor Scorer.
    """
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    readiness_levels: ReadinessThresholds = Field(default_factory=ReadinessThresholds)
    # Scoring fans out over candidates when > 1
    max_workers: int = 1

    # Experience score
    experience_base: float = 50.0
    experience_min_bonus: float = 20.0
    experience_range_bonus: float = 20.0
    experience_excess_slope: float = 2.0
    experience_excess_cap: float = 15.0
    experience_deficit_slope: float = 10.0
    # Requested experience areas: none covered -> max(floor, score * factor)
    experience_area_mismatch_factor: float = Field(default=0.6, ge=0, le=1)
    experience_area_mismatch_floor: float = 30.0
    experience_area_partial_factor: float = Field(default=0.8, ge=0, le=1)
    experience_area_partial_floor: float = 60.0

    # Growth score
    growth_recent_skill_months: int = 6


class ExplanationConfig(BaseModel):
    """Configuration for the Explanation Generator."""
    confidence: int = Field(default=80, ge=0, le=100)
    max_strength_clusters: int = 3
    max_listed_skills: int = 3
    max_readiness_months: int = 24
    months_per_missing_skill: int = 2
    months_per_underleveled_skill: int = 1
    months_for_experience_gap: int = 6
    profile_completeness_target: int = 70


class NormalizerConfig(BaseModel):
    """Configuration for the Requirement Normalizer."""
    unresolved_weight_factor: float = Field(default=0.5, ge=0, le=1)
    keyword_weight: float = Field(default=0.3, ge=0, le=1)
    critical_weight_threshold: float = Field(default=0.8, ge=0, le=1)
    default_level: str = "intermediate"
    extraction_retries: int = 2
    extraction_retry_wait_seconds: float = 0.5


class ResultPolicy(BaseModel):
    """Post-scoring result filtering and truncation policy.

    Applied to the ranked list when it is read; the cached ranking always
    holds the whole pool.
    """
    min_score_threshold: float = 0.0  # 0-100, filter threshold
    top_k: Optional[int] = None  # None = keep every candidate
    include_not_ready: bool = True  # False = drop candidates without the rotation flag from the list


class MatchingConfig(BaseModel):
    """
    Top-level matching configuration.
    """
    # Taxonomy YAML; None = bundled default taxonomy
    taxonomy_file: Optional[str] = None

    skill_match: SkillMatchConfig = Field(default_factory=SkillMatchConfig)
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    explanation: ExplanationConfig = Field(default_factory=ExplanationConfig)
    normalizer: NormalizerConfig = Field(default_factory=NormalizerConfig)
    result_policy: ResultPolicy = Field(default_factory=ResultPolicy)


class WebConfig(BaseModel):
    """Web server configuration."""
    host: str = "0.0.0.0"
    port: int = 8080


class AppConfig(BaseModel):
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    env_taxonomy = os.environ.get("TAXONOMY_FILE")
    if env_taxonomy:
        data.setdefault('matching', {})
        data['matching']['taxonomy_file'] = env_taxonomy

    env_workers = os.environ.get("MATCHING_MAX_WORKERS")
    if env_workers:
        data.setdefault('matching', {})
        data['matching'].setdefault('scorer', {})
        data['matching']['scorer']['max_workers'] = int(env_workers)

    if 'WEB_HOST' in os.environ:
        data.setdefault('web', {})
        data['web']['host'] = os.environ['WEB_HOST']

    if 'WEB_PORT' in os.environ:
        data.setdefault('web', {})
        data['web']['port'] = int(os.environ['WEB_PORT'])

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from a subdirectory), try the repository root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.info("No config.yaml found, using defaults")

    data = _apply_env_overrides(data)
    return AppConfig(**data)
