#!/usr/bin/env python3
"""
Candidate Matching API - FastAPI Application

Ranked, explainable candidate matches for vacancies and free-text searches,
with automatic API documentation.

Usage:
    python -m web.backend.app

Then open:
    - http://localhost:8080/docs - API Documentation (Swagger UI)
    - http://localhost:8080/redoc - Alternative API Documentation
"""

import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from core.engine import MatchingEngine
from core.exceptions import MatchingError
from .config import get_config
from .dependencies import get_engine
from .exceptions import (
    matching_exception_handler,
    request_validation_handler,
    http_exception_handler,
    general_exception_handler
)
from .models.responses import HealthResponse
from .routers import (
    matches_router,
    candidates_router,
    taxonomy_router
)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Candidate Matching API",
    description="Ranked, explainable candidate-vacancy matches",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Register exception handlers
app.add_exception_handler(MatchingError, matching_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(matches_router)
app.include_router(candidates_router)
app.include_router(taxonomy_router)


@app.get("/health", response_model=HealthResponse)
def health_check(engine: MatchingEngine = Depends(get_engine)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service="matching-api",
        taxonomy_skills=len(engine.taxonomy),
        cached_keys=len(engine.coordinator.keys())
    )


def main():
    """Run the web server."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    config = get_config()

    logger.info(f"Starting Matching API on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        "web.backend.app:app",
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
