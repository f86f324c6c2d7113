"""
Meeting control endpoints: join, leave, list and schedule.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from meeting_bot.api.v1.schemas.meeting import (
    ActiveMeeting,
    ErrorResponse,
    JoinRequest,
    JoinResponse,
    LeaveRequest,
    LeaveResponse,
    ScheduleRequest,
    ScheduleResponse,
    ScheduledJoinInfo,
)
from meeting_bot.config import get_logger
from meeting_bot.core.dependencies import get_orchestrator
from meeting_bot.core.exceptions import (
    DuplicateSessionError,
    HTTPBadRequest,
    HTTPConflict,
    HTTPInternalServerError,
    HTTPNotFound,
    SchedulerError,
    SessionNotFoundError,
    UnsupportedPlatformError,
)

router = APIRouter()
logger = get_logger("api.meetings")


@router.post(
    "/join",
    response_model=JoinResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def join_meeting(
    request: JoinRequest,
    orchestrator=Depends(get_orchestrator)
) -> Dict[str, Any]:
    """
    Join a meeting now. Returns once the bot is in the meeting or the join
    failed.
    """
    logger.info(f"Join request: {request.platform} -> {request.meeting_url}")
    try:
        result = await orchestrator.request_join(
            request.platform,
            request.meeting_url,
            password=request.password,
            bot_name=request.bot_name,
        )
    except UnsupportedPlatformError as e:
        raise HTTPBadRequest(e.message)
    except DuplicateSessionError as e:
        raise HTTPConflict(e.message)

    return result.to_dict()


@router.post("/leave", response_model=LeaveResponse, responses={404: {"model": ErrorResponse}})
async def leave_meeting(
    request: LeaveRequest,
    orchestrator=Depends(get_orchestrator)
) -> Dict[str, Any]:
    """Remove the bot from a meeting."""
    try:
        result = await orchestrator.request_leave(request.meeting_id)
    except SessionNotFoundError as e:
        raise HTTPNotFound(e.message)

    return result.to_dict()


@router.get("/active", response_model=List[ActiveMeeting])
async def list_active_meetings(orchestrator=Depends(get_orchestrator)) -> List[Dict[str, Any]]:
    """Meetings the bot is currently in or joining."""
    return [summary.to_dict() for summary in orchestrator.list_active()]


@router.post(
    "/schedule",
    response_model=ScheduleResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def schedule_meeting(
    request: ScheduleRequest,
    orchestrator=Depends(get_orchestrator)
) -> Dict[str, Any]:
    """Schedule the bot to join a meeting later."""
    try:
        job = orchestrator.schedule_join(
            request.platform,
            request.meeting_url,
            request.scheduled_time,
            password=request.password,
            bot_name=request.bot_name,
        )
    except UnsupportedPlatformError as e:
        raise HTTPBadRequest(e.message)
    except DuplicateSessionError as e:
        raise HTTPConflict(e.message)
    except SchedulerError as e:
        logger.error(f"Schedule request failed: {e.message}")
        raise HTTPInternalServerError(e.message)

    return {
        "success": True,
        "job_id": job.job_id,
        "scheduled_time": job.scheduled_time,
        "message": f"Bot scheduled to join at {job.scheduled_time.isoformat()}",
    }


@router.get("/scheduled", response_model=List[ScheduledJoinInfo])
async def list_scheduled_meetings(orchestrator=Depends(get_orchestrator)) -> List[Dict[str, Any]]:
    """Pending scheduled joins."""
    return [job.to_dict() for job in orchestrator.list_scheduled()]


@router.delete("/scheduled/{job_id}", responses={404: {"model": ErrorResponse}})
async def cancel_scheduled_meeting(job_id: str, orchestrator=Depends(get_orchestrator)) -> Dict[str, Any]:
    """Cancel a pending scheduled join."""
    if not orchestrator.cancel_scheduled(job_id):
        raise HTTPNotFound(f"Scheduled join not found: {job_id}")
    return {"success": True, "job_id": job_id}
