"""
FastAPI application initialization for the Meeting Bot API.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meeting_bot.config import settings, get_logger
from meeting_bot.api.v1.router import api_router
from meeting_bot.core.dependencies import get_orchestrator, set_orchestrator_instance
from meeting_bot.meeting_handler.meeting_orchestrator import MeetingOrchestrator

logger = get_logger("main")

app = FastAPI(
    title=settings.project_name,
    version=settings.version,
    description="Automated meeting attendance with audio relay to transcription",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    """Create the orchestrator and start the browser runtime and scheduler."""
    logger.info("Starting Meeting Bot API...")
    orchestrator = MeetingOrchestrator()
    set_orchestrator_instance(orchestrator)
    await orchestrator.start()
    logger.info("Meeting Bot API started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Leave all meetings and release browsers."""
    logger.info("Shutting down Meeting Bot API...")
    orchestrator = await get_orchestrator()
    await orchestrator.shutdown()
    set_orchestrator_instance(None)
    logger.info("Meeting Bot API shutdown complete")


@app.get("/", tags=["Root"])
async def root():
    """Service description."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "endpoints": {
            "join": "POST /api/v1/meetings/join",
            "leave": "POST /api/v1/meetings/leave",
            "active": "GET /api/v1/meetings/active",
            "schedule": "POST /api/v1/meetings/schedule",
            "health": "GET /api/v1/health",
        },
    }
