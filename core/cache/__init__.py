"""Cache Module - Caching services."""
from core.cache.match_cache import (
    CacheState,
    MatchCoordinator
)

__all__ = [
    'CacheState',
    'MatchCoordinator'
]
