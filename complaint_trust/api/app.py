"""FastAPI application for the complaint authenticity service."""

import contextlib
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from ..infrastructure.dependencies import get_service_container
from .endpoints import health, proximity, reports
from .endpoints.health import API_VERSION

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Close geocoder clients and database connections on shutdown."""
    logger.info("🚀 Complaint trust API starting")

    yield  # Application runs here

    if get_service_container.cache_info().currsize:
        await get_service_container().shutdown()


# Create FastAPI application
app = FastAPI(
    title="Complaint Trust API",
    description="Authenticity classification for consumer complaint reports",
    version=API_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(proximity.router)
app.include_router(reports.router)
