# routers/activity_logs.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.cache import SimpleCache, get_cache
from core.errors import handle_supabase_error
from core.permission_helpers import requires_permission
from models.activity_log import ActivityLogFilters
from models.enums import ActivityCategory, AdminPage, PermissionAction
from services.activity_logger import activity_stats, list_activity


router = APIRouter(
    prefix="/activity-logs",
    tags=["Activity Logs"],
    dependencies=[Depends(requires_permission(AdminPage.activity, PermissionAction.read))],
)


@router.get("", summary="Admin activity log")
def list_activity_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    category: Optional[ActivityCategory] = None,
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
):
    filters = ActivityLogFilters(
        page=page,
        limit=limit,
        category=category,
        user_id=user_id,
        action=action,
        date_from=date_from,
        date_to=date_to,
    )
    try:
        return {"success": True, "data": list_activity(filters)}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch activity logs")


@router.get("/stats", summary="Activity statistics")
def activity_log_stats(
    days: int = Query(7, ge=1, le=365),
    cache: SimpleCache = Depends(get_cache),
):
    try:
        return {"success": True, "data": activity_stats(days, cache)}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch activity statistics")
