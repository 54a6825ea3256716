"""
FastAPI application factory for the divination service
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .agent.generation import GenerationClient
from .api import analysis_router, consultation_router
from .api.models import HealthResponse
from .config import Config, get_config

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting divination backend...")
    yield
    logger.info("Shutting down divination backend...")
    # Injected clients belong to the caller
    if app.state.owns_generation_client:
        await app.state.generation_client.aclose()


def create_app(
    config: Optional[Config] = None,
    generation_client: Optional[GenerationClient] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Optional configuration object (loaded from YAML if omitted)
        generation_client: Optional generation backend, left open on
            shutdown; when omitted the primary (or fallback) model from
            config is built on the first request and closed on shutdown

    Returns:
        Configured FastAPI app
    """
    if config is None:
        config = get_config()

    app = FastAPI(
        title="Divination API",
        description="Multi-agent Liu Yao divination with QA review",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.generation_client = generation_client
    app.state.owns_generation_client = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Divination API",
            "version": API_VERSION,
            "status": "running",
        }

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthResponse(
            status="healthy",
            services={
                "api": "running",
                "generation": config.model.primary,
            },
            version=API_VERSION,
        )

    app.include_router(analysis_router)
    app.include_router(consultation_router)

    return app
