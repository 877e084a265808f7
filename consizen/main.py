"""FastAPI application entry point with lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from consizen.config import settings
from consizen.routes import router
from consizen.services.analysis import SustainabilityAnalyst
from consizen.services.cache import create_cache
from consizen.services.llm import LLMService
from consizen.services.metrics import Metrics
from consizen.services.proxy import GenerationProxy

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    # Startup
    logger.info("Starting ConsizeN AI proxy...")

    llm_service = LLMService()
    llm_service.initialize()
    logger.info("LLM service initialized")

    try:
        cache = create_cache()
        logger.info(f"Response cache ready (backend={settings.cache_backend})")
    except Exception as e:
        logger.error(f"Failed to create response cache: {e}")
        raise

    app.state.proxy = GenerationProxy(cache=cache, llm=llm_service, metrics=Metrics())
    app.state.analyst = SustainabilityAnalyst(app.state.proxy)

    logger.info("ConsizeN AI proxy started successfully")

    yield

    # Shutdown
    logger.info("Shutting down ConsizeN AI proxy...")
    close = getattr(cache, "close", None)
    if close is not None:
        close()
    logger.info("ConsizeN AI proxy stopped")


app = FastAPI(
    title="ConsizeN AI Proxy",
    description="Model-selecting, caching proxy for Gemini sustainability analyses",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routes
app.include_router(router)
