# services/activity_logger.py

"""
Admin activity log: who did what in the panel (logins, user management,
blog/staff edits). Writes are best effort, same contract as the SEO
audit recorder.
"""

from collections import Counter
from datetime import timedelta
from typing import Callable, Optional

from core.cache import SimpleCache
from core.config import settings
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.utils import utc_now
from dependencies.auth import CurrentUser
from models.activity_log import ActivityLogCreate, ActivityLogFilters
from models.audit_log import AuditOutcome, Pagination
from models.enums import ActivityCategory


ACTIVITY_TABLE = "activity_logs"


def log_activity(
    user: CurrentUser,
    action: str,
    category: ActivityCategory,
    details: Optional[dict] = None,
    request_meta: Optional[dict] = None,
    *,
    clock: Callable = utc_now,
) -> AuditOutcome:
    try:
        entry = ActivityLogCreate(
            user_id=user.id,
            user_email=user.email,
            user_name=user.display_name,
            user_role=user.role,
            action=action,
            category=category,
            details=details or {},
            **(request_meta or {}),
        )
        row = entry.model_dump(mode="json")
        row["timestamp"] = clock().isoformat()

        client = get_supabase_client()
        if client is None:
            raise RuntimeError("Supabase client not configured")

        result = client.table(ACTIVITY_TABLE).insert(row).execute()
        entry_id = None
        if result.data and result.data[0].get("id") is not None:
            entry_id = str(result.data[0]["id"])
        return AuditOutcome(recorded=True, entry_id=entry_id)

    except Exception as e:
        logger.error(f"Failed to log activity '{action}' for {user.id}: {e}")
        return AuditOutcome(recorded=False, error=str(e))


def list_activity(filters: ActivityLogFilters) -> dict:
    page = max(filters.page, 1)
    limit = min(max(filters.limit, 1), settings.AUDIT_LOG_MAX_PAGE_SIZE)
    skip = (page - 1) * limit

    client = get_supabase_client()
    query = client.table(ACTIVITY_TABLE).select("*", count="exact")

    if filters.category:
        query = query.eq("category", filters.category.value)
    if filters.user_id:
        query = query.eq("user_id", filters.user_id)
    if filters.action:
        query = query.ilike("action", f"%{filters.action}%")
    if filters.date_from:
        query = query.gte("timestamp", filters.date_from.isoformat())
    if filters.date_to:
        query = query.lte("timestamp", filters.date_to.isoformat())

    res = query.order("timestamp", desc=True).range(skip, skip + limit - 1).execute()

    logs = res.data or []
    total = res.count if res.count is not None else len(logs)
    return {
        "logs": logs,
        "pagination": Pagination.build(page, limit, total).model_dump(),
    }


def activity_stats(days: int, cache: SimpleCache, *, clock: Callable = utc_now) -> dict:
    """Counts by category and action over the last `days` days (cached)."""
    cache_key = f"activity:stats:{days}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    date_from = clock() - timedelta(days=days)
    client = get_supabase_client()
    res = (
        client.table(ACTIVITY_TABLE)
        .select("category,action,user_id")
        .gte("timestamp", date_from.isoformat())
        .execute()
    )
    rows = res.data or []

    stats = {
        "days": days,
        "total": len(rows),
        "by_category": dict(Counter(r.get("category") for r in rows)),
        "top_actions": [
            {"action": action, "count": count}
            for action, count in Counter(r.get("action") for r in rows).most_common(10)
        ],
        "active_users": len({r.get("user_id") for r in rows if r.get("user_id")}),
    }

    cache.set(cache_key, stats, ttl_seconds=settings.ACTIVITY_STATS_CACHE_TTL_SECONDS)
    return stats
