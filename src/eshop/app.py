"""Storefront FastAPI application.

Serves carts, order placement, order history and stock alerts over HTTP.
Each request runs inside the storefront domain context and is tagged with a
request id that every log line carries.

Usage:
    uvicorn eshop.app:app --host 0.0.0.0 --port 8000 --reload
"""

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eshop.config import load_settings
from eshop.utils.logging import add_context, clear_context, configure_logging

# ---------------------------------------------------------------------------
# Logging and domain initialization
# ---------------------------------------------------------------------------
# Logging is configured first so Protean keeps our handlers instead of
# installing its own defaults during init.
settings = load_settings()
configure_logging(settings.log_level, log_dir=settings.log_dir)

from eshop.api import cart_router, order_router, register_error_handlers, stock_alert_router  # noqa: E402
from eshop.catalogue.seed import seed_catalogue  # noqa: E402
from eshop.storefront import init_domain, reset_storefront  # noqa: E402

domain = init_domain()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    with domain.domain_context():
        domain.setup_database()
        if settings.seed:
            seed_catalogue()
    logger.info("Storefront started", env=settings.env)
    yield
    reset_storefront()
    logger.info("Storefront stopped")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="eShop Storefront API",
    description="E-commerce storefront — carts, ordering and stock alerts",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context and bind a request id to every log line."""
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    add_context(request_id=request_id, user_id=request.headers.get("X-User-Id"))
    try:
        with domain.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = request_id
    return response


register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(stock_alert_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "env": settings.env, "domain": domain.name})
