"""hivemint API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Ledger client, metadata publisher and hive store constructed once in the
      lifespan from Settings and stored on app.state (no module-level clients)
    - Global error handlers map HiveMintError → {success: false, error}
    - Origin allow-list enforced before CORS headers are applied

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SQL backend seeds itself from the JSON hive file on first start
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hivemint.api.error_handlers import register_error_handlers
from hivemint.api.origin_guard import OriginAllowListMiddleware
from hivemint.api.routes import health, hives, tokens
from hivemint.config import Settings, get_settings
from hivemint.core.repository_protocols import HiveStore
from hivemint.infrastructure.database import DatabaseSessionManager
from hivemint.infrastructure.hedera_client import HederaLedgerClient
from hivemint.infrastructure.json_hive_store import JsonHiveStore
from hivemint.infrastructure.observability import setup_logging
from hivemint.infrastructure.pinata_client import PinataMetadataPublisher
from hivemint.infrastructure.sql_hive_store import SqlHiveStore

logger = logging.getLogger(__name__)


async def build_hive_store(
    settings: Settings,
) -> tuple[HiveStore, DatabaseSessionManager | None]:
    """Select the hive store backend; returns the DB manager to dispose, if any."""
    json_store = JsonHiveStore(settings.hives_path)
    if settings.hive_store_backend == "json":
        return json_store, None
    db = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    await db.create_all()
    store = SqlHiveStore(db)
    await store.seed(await json_store.list_all())
    return store, db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if not settings.pinata_jwt:
        logger.warning("PINATA_JWT not set; metadata will use fallback pointers")

    app.state.ledger_client = HederaLedgerClient(
        settings.operator_account_id,
        settings.operator_private_key,
        network=settings.hedera_network,
        collection_name=settings.collection_name,
        collection_symbol=settings.collection_symbol,
    )
    publisher = PinataMetadataPublisher(
        settings.pinata_jwt, settings.pinata_api_url, settings.pinata_gateway,
    )
    app.state.metadata_publisher = publisher
    app.state.hive_store, db = await build_hive_store(settings)

    logger.info(
        f"hivemint API started (environment={settings.environment}, "
        f"network={settings.hedera_network}, store={settings.hive_store_backend})",
    )
    yield
    await publisher.aclose()
    if db is not None:
        await db.dispose()
    logger.info("hivemint API shutting down")


app = FastAPI(title="hivemint API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Added last = outermost: unknown origins never reach CORS or the routes
app.add_middleware(
    OriginAllowListMiddleware, allowed_origins=settings.allowed_origins,
)

app.include_router(health.router)
app.include_router(tokens.router)
app.include_router(hives.router)

register_error_handlers(app)
