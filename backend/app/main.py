# backend/app/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from .core.config import DEV_SECRET_KEY, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .middleware.prometheus_middleware import METRICS_PATH, PrometheusMiddleware
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import (
    admin_dbs as admin_dbs_v1,
    bookings as bookings_v1,
    children as children_v1,
    conversations as conversations_v1,
    dbs as dbs_v1,
    health as health_v1,
    notifications as notifications_v1,
    progress as progress_v1,
    resources as resources_v1,
    reviews as reviews_v1,
    tutors as tutors_v1,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(
        f"Environment: {settings.environment} storage={settings.storage_backend} "
        f"dual_confirmation={settings.booking_require_dual_confirmation}"
    )
    if settings.is_production() and settings.secret_key.get_secret_value() == DEV_SECRET_KEY:
        logger.warning("SECRET_KEY is still the development default")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.cors_origins)

app.add_middleware(PrometheusMiddleware)

# API v1; prefixes are applied here, not in the route modules
api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(health_v1.router, prefix="/health")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(children_v1.router, prefix="/children")
api_v1.include_router(conversations_v1.router, prefix="/conversations")
api_v1.include_router(dbs_v1.router, prefix="/dbs")
api_v1.include_router(admin_dbs_v1.router, prefix="/admin/dbs")
api_v1.include_router(notifications_v1.router, prefix="/notifications")
api_v1.include_router(progress_v1.router, prefix="/progress")
api_v1.include_router(resources_v1.router, prefix="/resources")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(tutors_v1.router, prefix="/tutors")

app.include_router(api_v1)
# Unversioned path for load balancers
app.include_router(health_v1.router, prefix="/health")


@app.get("/")
def read_root() -> dict:
    """Root endpoint - API information"""
    return {"message": f"Welcome to the {BRAND_NAME} API", "version": API_VERSION, "docs": "/docs"}


@app.get(METRICS_PATH, include_in_schema=False)
def internal_metrics() -> Response:
    """Prometheus scrape endpoint."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
