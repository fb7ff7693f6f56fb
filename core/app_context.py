from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from core.config_loader import AppConfig
from core.engine import MatchingEngine
from core.taxonomy import SkillTaxonomy, load_taxonomy


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Single source of truth for building the taxonomy and the matching engine,
    shared by the CLI and the web backend.
    """
    config: AppConfig
    taxonomy: SkillTaxonomy
    engine: MatchingEngine

    @classmethod
    def build(cls, config: AppConfig, clock: Optional[Callable[[], datetime]] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            clock: Source of the scoring date; defaults to the wall clock

        Returns:
            Fully wired AppContext instance
        """
        taxonomy = load_taxonomy(config.matching.taxonomy_file)
        engine = MatchingEngine(config.matching, taxonomy, clock=clock)
        return cls(config=config, taxonomy=taxonomy, engine=engine)
