"""
Clinic Management REST API
Clinicians manage their own patients and visit records behind cookie sessions
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

# Import our modules
from clinic_api.config import Settings, get_settings
from clinic_api.database import Database
from clinic_api.auth.auth_handler import AuthHandler
from clinic_api.routers import users, patients, visits, dashboards
from clinic_api.utils.error_handler import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    # Startup
    logger.info("Starting Clinic API...")
    app.state.database.create_all()
    logger.info("Database tables created/verified")

    yield

    # Shutdown
    logger.info("Shutting down Clinic API...")
    app.state.database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its explicitly constructed resources"""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Clinic Management API",
        description="Patients, visits and dashboard statistics for authenticated clinicians",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = Database(
        settings.database_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
    )
    app.state.auth_handler = AuthHandler(settings.token_secret_key)

    # Cookies cross origins, so the origin must be explicit
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(users.router, prefix="/api/user", tags=["users"])
    app.include_router(patients.router, prefix="/api/patients", tags=["patients"])
    app.include_router(visits.router, prefix="/api/visits", tags=["visits"])
    app.include_router(dashboards.router, prefix="/api/dashboards", tags=["dashboards"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    return app


app = create_app()

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower()
    )
