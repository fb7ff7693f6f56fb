#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import threading
from typing import Optional

from core.app_context import AppContext
from core.engine import MatchingEngine
from .config import get_config

_context_lock = threading.Lock()
_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    """Build the shared AppContext on first use."""
    global _context
    with _context_lock:
        if _context is None:
            _context = AppContext.build(get_config())
        return _context


def get_engine() -> MatchingEngine:
    """
    FastAPI dependency that returns the process-wide matching engine.

    The engine owns the match cache, so every request must see the same
    instance.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(engine: MatchingEngine = Depends(get_engine)):
            ...
    """
    return get_app_context().engine
