"""API route handlers."""

from .matches import router as matches_router
from .candidates import router as candidates_router
from .taxonomy import router as taxonomy_router
