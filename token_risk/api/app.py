"""FastAPI application factory for the token risk API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config.settings import settings
from token_risk.analyzer.engine import SourceClients, TokenRiskAnalyzer, build_analyzer
from token_risk.api.routers.analyze import limiter, router as analyze_router


def create_app(analyzer: TokenRiskAnalyzer | None = None) -> FastAPI:
    """Build the API app.

    Without an injected analyzer the provider clients are created on
    startup from settings and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if analyzer is not None:
            app.state.analyzer = analyzer
            yield
            return

        async with SourceClients(settings) as clients:
            app.state.analyzer = build_analyzer(settings, clients)
            logger.info("[API] Provider clients ready")
            yield
        logger.info("[API] Provider clients closed")

    app = FastAPI(
        title="Token Risk Analyzer API",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.include_router(analyze_router)
    return app
