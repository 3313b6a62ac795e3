import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from scalar_fastapi import get_scalar_api_reference

from app.api.v1.router import v1_router
from app.config import settings
from app.errors import register_exception_handlers
from app.services.supabase_client import is_configured

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# OpenAPI tag metadata: grouping and descriptions in Scalar
# ---------------------------------------------------------------------------
TAG_METADATA = [
    {
        "name": "opportunities",
        "description": "Investment opportunities: public search with keyword, classification, "
        "investment/IRR range and location filters; authenticated listing and detail.",
    },
    {
        "name": "health",
        "description": "Liveness probe and store configuration status.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Opportunity API starting")
    if is_configured():
        logger.info("Opportunity store: %s (table %s)", settings.SUPABASE_URL, settings.OPPORTUNITIES_TABLE)
    else:
        logger.warning(
            "SUPABASE_URL / SUPABASE_KEY not set; opportunity endpoints will fail until configured"
        )

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    title="Opportunity API",
    summary="Commercial real-estate investment opportunities",
    description=(
        "## Overview\n\n"
        "Read API over investment opportunities stored in Supabase.\n\n"
        "| Endpoint | Access |\n"
        "|----------|--------|\n"
        "| `GET /api/v1/opportunities/search` | public |\n"
        "| `GET /api/v1/opportunities/` | signed-in users |\n"
        "| `GET /api/v1/opportunities/{id}` | signed-in users |\n\n"
        "## Status vocabulary\n\n"
        "- `fundraising`, `due_diligence` → `active`\n"
        "- `funded` → `closed`\n"
        "- `cancelled` → `archived`\n\n"
        "Errors are returned as `{\"error\": \"...\"}`."
    ),
    version="0.1.0",
    openapi_tags=TAG_METADATA,
    lifespan=lifespan,
    # Swagger UI moves to /swagger; Scalar serves /docs
    docs_url="/swagger",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register API routes
app.include_router(v1_router)


@app.get("/", tags=["default"], summary="API entry", include_in_schema=False)
async def root():
    return {
        "message": "Opportunity API",
        "version": "0.1.0",
        "docs": "/docs",
        "swagger": "/swagger",
        "openapi": "/openapi.json",
    }


@app.get("/docs", include_in_schema=False)
async def scalar_html():
    return get_scalar_api_reference(
        openapi_url=app.openapi_url,
        title=app.title,
    )
