"""Service lifespan handling.

This module defines the context manager that handles:
- Startup: configure logging, open the catalog pool, build the LLM client
  and wire the substitution service
- Shutdown: close the LLM client and the catalog pool
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ingredient_substitution.core.config import Settings, get_settings
from ingredient_substitution.database import (
    IngredientRepository,
    SubstitutionLogRepository,
    close_database_pool,
    init_database_pool,
)
from ingredient_substitution.llm.client import OpenRouterClient
from ingredient_substitution.llm.selection import ModelSelector
from ingredient_substitution.observability.logging import get_logger, setup_logging
from ingredient_substitution.observability.metrics import SubstitutionMetrics
from ingredient_substitution.services.substitution import SubstitutionService
from ingredient_substitution.vocabulary import VocabularyCache


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger(__name__)


def _build_llm_client(settings: Settings, selector: ModelSelector) -> OpenRouterClient:
    return OpenRouterClient(
        api_key=settings.OPENROUTER_API_KEY,
        model=selector.model_ids[0],
        base_url=settings.llm.base_url,
        timeout=settings.llm.timeout,
        requests_per_minute=settings.llm.requests_per_minute,
    )


async def _startup(settings: Settings) -> tuple[SubstitutionService, OpenRouterClient]:
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting service",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    selector = ModelSelector(settings.llm.generation.models)
    llm_client = _build_llm_client(settings, selector)

    # Catalog is critical - don't continue without it
    pool = await init_database_pool(settings)
    await llm_client.initialize()

    catalog = IngredientRepository(pool)
    vocabulary = VocabularyCache(catalog, ttl_seconds=settings.vocabulary.ttl_seconds)

    service = SubstitutionService(
        vocabulary,
        catalog,
        llm_client,
        log_store=SubstitutionLogRepository(pool),
        metrics=SubstitutionMetrics(enabled=settings.observability.metrics.enabled),
        model_selector=selector,
        settings=settings,
    )
    await service.initialize()

    logger.info("Service startup complete")
    return service, llm_client


async def _shutdown(service: SubstitutionService, llm_client: OpenRouterClient) -> None:
    logger.info("Shutting down service")

    await service.shutdown()
    await llm_client.shutdown()
    await close_database_pool()

    logger.info("Service shutdown complete")


@asynccontextmanager
async def substitution_service(
    settings: Settings | None = None,
) -> AsyncGenerator[SubstitutionService]:
    """Run a fully wired SubstitutionService for the duration of the block.

    Args:
        settings: Optional settings; the cached global settings otherwise.

    Yields:
        The initialized service.
    """
    settings = settings or get_settings()
    service, llm_client = await _startup(settings)
    try:
        yield service
    finally:
        await _shutdown(service, llm_client)
