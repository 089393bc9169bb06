import json
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from config.logging import setup_logging
from api.assets.views import router as assets_router
from api.audits.views import router as audits_router
from api.dashboard.views import router as dashboard_router
from api.departments.views import router as departments_router
from api.locations.views import router as locations_router
from api.settings.views import router as settings_router
from api.statuses.views import router as statuses_router
from api.transfers.views import router as transfers_router
from api.users.views import router as users_router

logger = logging.getLogger("api")


def get_cors_origins() -> list[str]:
    """Get CORS origins from environment variable or use defaults."""
    cors_env = os.environ.get("CORS_ORIGINS", "")

    # Try to parse as JSON array
    if cors_env:
        try:
            origins = json.loads(cors_env)
            if isinstance(origins, list):
                return origins
        except json.JSONDecodeError:
            # If not valid JSON, treat as comma-separated
            return [o.strip() for o in cors_env.split(",") if o.strip()]

    # Default origins for local development
    return [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Asset custody API starting (env=%s)", settings.APP_ENV)
    yield
    logger.info("Asset custody API stopped")


app = FastAPI(
    title="Asset Custody API",
    description="Departmental asset registry with transfer and audit workflows",
    version="1.0.0",
    lifespan=lifespan,
)

# Get CORS origins from environment or use defaults
cors_origins = get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Reference data
app.include_router(statuses_router, prefix="/api/v1")
app.include_router(departments_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(settings_router, prefix="/api/v1")

# Registry and workflows
app.include_router(assets_router, prefix="/api/v1")
app.include_router(transfers_router, prefix="/api/v1")
app.include_router(audits_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health", tags=["system"])
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
