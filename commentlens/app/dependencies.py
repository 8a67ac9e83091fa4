"""
Service Dependency Injection
FastAPI dependency providers for services
"""

import logging
from functools import lru_cache

from fastapi import Header, HTTPException

from commentlens.app.config import get_config
from commentlens.app.database import db_manager
from commentlens.infrastructure.clients import create_gemini_client, create_youtube_client
from commentlens.services import (
    AnalysisOrchestrator,
    AnalysisRunRegistry,
    PersistenceService,
    ProfileStream,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Service Factories
# ============================================================================


@lru_cache()
def get_youtube_client():
    """YouTube API client (singleton)"""
    return create_youtube_client()


@lru_cache()
def get_gemini_client():
    """Gemini API client (singleton)"""
    return create_gemini_client()


@lru_cache()
def get_profile_stream() -> ProfileStream:
    return ProfileStream()


@lru_cache()
def get_persistence_service() -> PersistenceService:
    """Persistence service bound to the process-wide database manager"""
    return PersistenceService(database=db_manager, stream=get_profile_stream())


@lru_cache()
def get_run_registry() -> AnalysisRunRegistry:
    return AnalysisRunRegistry(max_runs=get_config().analysis.run_retention)


def _log_navigation(route: str) -> None:
    logger.info(f"🧭 Navigate to {route}")


@lru_cache()
def get_orchestrator() -> AnalysisOrchestrator:
    """
    Analysis orchestrator (singleton)

    Building it creates both API clients, which fail without API keys.
    """
    return AnalysisOrchestrator(
        video_gateway=get_youtube_client(),
        report_generator=get_gemini_client(),
        persistence=get_persistence_service(),
        navigate=_log_navigation,
        registry=get_run_registry(),
        config=get_config(),
    )


def reset_dependencies() -> None:
    """Drop cached singletons (tests)"""
    for factory in (
        get_youtube_client,
        get_gemini_client,
        get_profile_stream,
        get_persistence_service,
        get_run_registry,
        get_orchestrator,
    ):
        factory.cache_clear()


# ============================================================================
# Request Identity
# ============================================================================


async def get_current_user_id(x_user_id: str = Header(default="")) -> str:
    """Caller uid from the ``X-User-Id`` header"""
    uid = x_user_id.strip()
    if not uid:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return uid
