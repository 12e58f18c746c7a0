"""
Intervention Availability Matcher - Main Application
FastAPI Entry Point with APScheduler for stored match housekeeping
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse
import structlog

from app.config import settings
from app.database import init_db
from app.middleware import CorrelationIdMiddleware, bind_correlation_id
from app.routers import availabilities_router, matching_router
from app.scheduler import start_scheduler, stop_scheduler
from app.services.monitoring import init_sentry, setup_logging

# Structured Logging Setup
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ]
)
logger = structlog.get_logger()

# FastAPI App
app = FastAPI(
    title="Intervention Availability Matcher",
    description="Matches tenant and provider availabilities and schedules interventions",
    version="1.0.0",
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None,
)

# Last added runs first: the correlation id is set before it is bound
app.middleware("http")(bind_correlation_id)
app.add_middleware(CorrelationIdMiddleware)

# Register routers
app.include_router(availabilities_router)
app.include_router(matching_router)

scheduler = None


@app.on_event("startup")
async def startup_event():
    """Application Startup"""
    global scheduler

    setup_logging(environment=settings.environment)
    init_sentry()
    logger.info("startup", environment=settings.environment)

    # Initialize database connection
    init_db()
    logger.info("database_initialized")

    # Stored match housekeeping (skipped in testing)
    scheduler = start_scheduler(settings.environment)


@app.on_event("shutdown")
async def shutdown_event():
    """Application Shutdown"""
    logger.info("shutdown")
    stop_scheduler(scheduler)


@app.get("/")
async def root():
    """Root Endpoint"""
    return {
        "message": "Intervention Availability Matcher API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """
    Health Check Endpoint
    Reports whether the application and its scheduler are running
    """
    health_status = {
        "status": "healthy",
        "environment": settings.environment,
        "services": {
            "api": "running",
            "scheduler": "running" if scheduler is not None and scheduler.running else "stopped"
        }
    }

    if settings.database_url:
        health_status["services"]["database"] = "configured"

    return JSONResponse(
        content=health_status,
        status_code=200
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development"
    )
