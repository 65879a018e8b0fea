import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blockdoc.api.deps import get_draft_store, get_rules, get_settings
from blockdoc.api.routes import documents, drafts

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load rules and open the draft database before serving; a bad rules file stops startup."""
    settings = get_settings()

    try:
        rules = get_rules(settings)
    except (FileNotFoundError, ValueError):
        logger.critical("Rules load failed from %s", settings.rules_path, exc_info=True)
        raise
    logger.info(
        "Rules loaded from %s (%d code languages)",
        settings.rules_path,
        len(rules.code.supported_languages),
    )

    get_draft_store(settings)
    logger.info("Draft store ready at %s", settings.db_path)

    yield


app = FastAPI(
    title="Block Document API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(documents.router, prefix="/api/documents", tags=["Documents"])
app.include_router(drafts.router, prefix="/api/drafts", tags=["Drafts"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    return {"status": "ok", "service": "api"}
