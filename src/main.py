import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import sentry_sdk
from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.config.logging import setup_logging
from src.config.settings import settings
from src.routers.healthz.router import VERSION
from src.routers.healthz.router import router as healthz_router
from src.rsvps.repository.store import SqlRsvpStore
from src.rsvps.routers import router as rsvps_router

logger = logging.getLogger(__name__)


ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


async def run_migrations():
    alembic_cfg = Config(str(ALEMBIC_INI))
    # logging is already set up by setup_logging()
    alembic_cfg.attributes["configure_logger"] = False
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        await run_migrations()

    # StorageUnavailable propagates and aborts startup
    store = SqlRsvpStore.from_dsn(settings.DB_DSN)
    await store.initialize()
    app.state.rsvp_store = store

    if not settings.OPERATOR_TOKEN:
        logger.warning("OPERATOR_TOKEN is not set; GET /api/rsvps is open to anyone")

    yield

    await store.dispose()


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Wedding RSVP API",
    description="API for collecting and reviewing wedding RSVPs",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(rsvps_router, tags=["RSVPs"])

frontend_dir = Path(settings.FRONTEND_DIST_DIR) if settings.FRONTEND_DIST_DIR else None

if frontend_dir and frontend_dir.is_dir():
    # mounted last so the API routes above take precedence
    app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
else:

    @app.get("/", tags=["Root"])
    async def root():
        return {"message": "Welcome to the Wedding RSVP API"}
