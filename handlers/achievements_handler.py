import logging
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from achievements import setup_achievements
from achievements.criteria import parse_criteria, unknown_metrics
from achievements.errors import AchievementError, InvalidViewerId, StorageUninitialized
from config import VIEWER_ID_HEADER
from schemas import (
    AchievementListResponse,
    MyAchievementsResponse,
    RecordActionResponse,
    ValidateCriteriaRequest,
    ValidateCriteriaResponse,
)

router = APIRouter(prefix="/api/v1")

NOT_MIGRATED_MESSAGE = "Stats DB not initialized (achievements tables missing). Run the database migrations."


async def get_achievement_service():
    return await setup_achievements()


async def get_events_service():
    from database import get_pool
    from repositories.viewer_stats_repository import ViewerStatsRepository
    from services.achievement_events_service import AchievementEventsService

    pool = await get_pool()
    return AchievementEventsService(
        achievement_service=await setup_achievements(pool),
        stats_repository=ViewerStatsRepository(pool),
    )


def get_viewer_user_id(request: Request) -> str:
    return (request.headers.get(VIEWER_ID_HEADER) or "").strip()


def error_response(status_code: int, error: str, message: str = "", details: str = ""):
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "details": details},
    )


def not_migrated(e: Exception):
    return error_response(503, StorageUninitialized.code, NOT_MIGRATED_MESSAGE, str(e))


# ------------------------------------------
# Public catalog
# ------------------------------------------
@router.get("/achievements", response_model=AchievementListResponse)
async def list_achievements(service=Depends(get_achievement_service)):
    try:
        achievements = await service.list_active_achievements()
    except StorageUninitialized as e:
        return not_migrated(e)

    return {"ok": True, "achievements": [a.to_dict() for a in achievements]}


# ------------------------------------------
# Criteria check for the admin editor
# ------------------------------------------
@router.post("/achievements/validate", response_model=ValidateCriteriaResponse)
async def validate_criteria(payload: ValidateCriteriaRequest):
    try:
        clauses = parse_criteria(payload.criteria)
    except AchievementError as e:
        return error_response(400, e.code, e.message)

    warnings = [f"Unknown metric '{m}' always evaluates as 0" for m in unknown_metrics(clauses)]
    return {
        "ok": True,
        "clauses": [
            {"metric": c.ref.canonical, "op": c.op, "threshold": c.threshold}
            for c in clauses
        ],
        "warnings": warnings,
    }


# ------------------------------------------
# Current viewer
# ------------------------------------------
@router.get("/me/achievements", response_model=MyAchievementsResponse)
async def my_achievements(
    viewer_user_id: str = Depends(get_viewer_user_id),
    service=Depends(get_achievement_service),
):
    if not viewer_user_id:
        return error_response(401, "auth_missing_user_id")

    try:
        rows = await service.list_unlocked_for_viewer(viewer_user_id)
    except StorageUninitialized as e:
        return not_migrated(e)

    return {"ok": True, "viewerUserId": viewer_user_id, "achievements": rows}


@router.get("/me/achievement-progress", response_model=dict)
async def my_achievement_progress(
    viewer_user_id: str = Depends(get_viewer_user_id),
    service=Depends(get_achievement_service),
):
    if not viewer_user_id:
        return error_response(401, "auth_missing_user_id")

    try:
        data = await service.progress_for_viewer(viewer_user_id)
    except StorageUninitialized as e:
        return not_migrated(e)
    except InvalidViewerId as e:
        return error_response(400, e.code, e.message)
    except Exception as e:
        logging.exception(f"❌ [ACH-PROGRESS] Progress failed for viewer {viewer_user_id}")
        return error_response(500, "server_error", "Failed to compute achievement progress.", str(e))

    return {"ok": True, "serverTimeMs": int(time.time() * 1000), **data}


@router.post("/me/actions/{action_key}", response_model=RecordActionResponse)
async def record_my_action(
    action_key: str,
    viewer_user_id: str = Depends(get_viewer_user_id),
    events=Depends(get_events_service),
):
    if not viewer_user_id:
        return error_response(401, "auth_missing_user_id")

    try:
        return await events.record_action(viewer_user_id, action_key)
    except StorageUninitialized as e:
        return not_migrated(e)
