import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from paid_access.api.deps import get_rules, get_settings
from paid_access.api.routes import checkout

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load rules on startup so a broken rules file fails fast."""
    settings = get_settings()
    rules = get_rules(settings)
    logger.info("Rules %s loaded from %s", rules.project.rules_version, settings.rules_path)
    yield


app = FastAPI(
    title="Paid Access Checkout API",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(checkout.router, prefix="/api/checkout", tags=["Checkout"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    return {"status": "ok"}
