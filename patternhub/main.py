"""
ASGI entry point: ``uvicorn patternhub.main:app --reload``.

On startup the schema is created, and with SEED_DEMO_DATA (the default) an
admin account and a demo catalogue are seeded; see ``patternhub/db/seeder.py``.
"""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from patternhub.api.router import api_router
from patternhub.core.cache_headers import PageCacheHeadersMiddleware
from patternhub.core.config import settings
from patternhub.core.logging_config import configure_logging
from patternhub.db.database import init_db
from patternhub.db.seeder import seed_admin, seed_catalog

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Preparing database at %s", settings.DATABASE_URL)
    init_db()
    if settings.SEED_DEMO_DATA:
        logger.warning("SEED_DEMO_DATA is on; seeding the default admin and demo catalogue")
        seed_admin()
        seed_catalog()
    yield
    logger.info("%s shutting down", settings.APP_NAME)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Bilingual design-pattern knowledge base: public catalogue pages "
            "with rendered Markdown articles and an admin API for editors."
        ),
        lifespan=lifespan,
    )
    app.add_middleware(PageCacheHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        # locale cookie
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    logger.info("%s %s ready", settings.APP_NAME, settings.APP_VERSION)
    return app


app = create_app()
