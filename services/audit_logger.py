# services/audit_logger.py

"""
SEO audit log recorder.

Every tracked mutation writes one immutable row to `seo_audit_logs`.
Writes are best effort: a single attempt, no retry, no queue. A failed
write is logged and reported through the returned AuditOutcome, never
raised, so the business mutation that triggered it is unaffected.
"""

from collections import Counter
from datetime import timedelta
from typing import Callable, List, Optional

from core.change_detection import detect_changes
from core.config import settings
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.utils import utc_now
from models.audit_log import (
    AuditLogCreate,
    AuditLogFilters,
    AuditMetadata,
    AuditOutcome,
    FieldChange,
    Pagination,
)
from models.enums import AuditAction, BULK_ACTIONS, EntityType


AUDIT_TABLE = "seo_audit_logs"

SEO_TRACKED_FIELDS = [
    "meta_title",
    "meta_description",
    "slug",
    "robots",
    "open_graph.title",
    "open_graph.description",
    "open_graph.image",
]


# ============================================================
# CORE RECORDER
# ============================================================
def create_audit_log(data: AuditLogCreate, *, clock: Callable = utc_now) -> AuditOutcome:
    """
    Persist one audit entry stamped with the current time.

    Never raises. The outcome tells the caller whether the row landed;
    most callers ignore it.
    """
    try:
        row = data.model_dump(mode="json")
        row["performed_at"] = clock().isoformat()

        client = get_supabase_client()
        if client is None:
            raise RuntimeError("Supabase client not configured")

        result = client.table(AUDIT_TABLE).insert(row).execute()
        entry_id = None
        if result.data and result.data[0].get("id") is not None:
            entry_id = str(result.data[0]["id"])

        logger.info(
            f"Audit log created: action={data.action} entity={data.entity_type} "
            f"path={data.path} performed_by={data.performed_by}"
        )
        return AuditOutcome(recorded=True, entry_id=entry_id)

    except Exception as e:
        logger.error(
            f"Failed to create audit log: {e} "
            f"(action={data.action} entity={data.entity_type} path={data.path} "
            f"performed_by={data.performed_by})"
        )
        return AuditOutcome(recorded=False, error=str(e))


# ============================================================
# CONVENIENCE RECORDERS (SEO pages, slugs, redirects, bulk)
# ============================================================
class SEOAuditLogger:

    @staticmethod
    def log_seo_page_create(
        site_id: str,
        path: str,
        page_data: dict,
        performed_by: str,
        entity_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> Optional[AuditOutcome]:
        changes = detect_changes(None, page_data, SEO_TRACKED_FIELDS)
        if not changes:
            return None

        return create_audit_log(AuditLogCreate(
            site_id=site_id,
            action=AuditAction.create,
            entity_type=EntityType.seo_page,
            entity_id=entity_id,
            path=path,
            changes=changes,
            metadata=AuditMetadata(**(metadata or {})),
            performed_by=performed_by,
        ))

    @staticmethod
    def log_seo_page_update(
        site_id: str,
        path: str,
        old_data: dict,
        new_data: dict,
        performed_by: str,
        entity_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> Optional[AuditOutcome]:
        """Returns None (and writes nothing) when no tracked field changed."""
        changes = detect_changes(old_data, new_data, SEO_TRACKED_FIELDS)
        if not changes:
            return None

        return create_audit_log(AuditLogCreate(
            site_id=site_id,
            action=AuditAction.update,
            entity_type=EntityType.seo_page,
            entity_id=entity_id,
            path=path,
            changes=changes,
            metadata=AuditMetadata(**(metadata or {})),
            performed_by=performed_by,
        ))

    @staticmethod
    def log_seo_page_delete(
        site_id: str,
        path: str,
        page_data: dict,
        performed_by: str,
        is_reset: bool = False,
        entity_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> Optional[AuditOutcome]:
        changes = detect_changes(page_data, None, SEO_TRACKED_FIELDS)
        if not changes:
            return None

        return create_audit_log(AuditLogCreate(
            site_id=site_id,
            action=AuditAction.reset if is_reset else AuditAction.delete,
            entity_type=EntityType.seo_page,
            entity_id=entity_id,
            path=path,
            changes=changes,
            metadata=AuditMetadata(**(metadata or {})),
            performed_by=performed_by,
        ))

    @staticmethod
    def log_slug_change(
        site_id: str,
        path: str,
        old_slug: str,
        new_slug: str,
        redirect_created: bool,
        performed_by: str,
        metadata: Optional[dict] = None,
    ) -> AuditOutcome:
        meta = AuditMetadata(**(metadata or {}))
        meta.redirect_created = redirect_created

        return create_audit_log(AuditLogCreate(
            site_id=site_id,
            action=AuditAction.slug_change,
            entity_type=EntityType.seo_page,
            path=path,
            old_slug=old_slug,
            new_slug=new_slug,
            changes=[FieldChange(field="slug", old_value=old_slug, new_value=new_slug)],
            metadata=meta,
            performed_by=performed_by,
        ))

    @staticmethod
    def log_redirect_create(
        site_id: str,
        from_path: str,
        to_path: str,
        status_code: int,
        performed_by: str,
        entity_id: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> AuditOutcome:
        return create_audit_log(AuditLogCreate(
            site_id=site_id,
            action=AuditAction.redirect_create,
            entity_type=EntityType.redirect,
            entity_id=entity_id,
            changes=[FieldChange(
                field="redirect",
                old_value=None,
                new_value={"from": from_path, "to": to_path, "status_code": status_code},
            )],
            metadata=AuditMetadata(**(metadata or {})),
            performed_by=performed_by,
        ))

    @staticmethod
    def log_bulk_operation(
        site_id: str,
        action: AuditAction,
        affected_paths: List[str],
        summary,
        performed_by: str,
        metadata: Optional[dict] = None,
    ) -> AuditOutcome:
        if action not in BULK_ACTIONS:
            raise ValueError(f"Not a bulk action: {action}")

        meta = AuditMetadata(**(metadata or {}))
        meta.bulk_operation = True
        meta.affected_paths = list(affected_paths)

        return create_audit_log(AuditLogCreate(
            site_id=site_id,
            action=action,
            entity_type=EntityType.seo_page,
            changes=[FieldChange(field="bulk_operation", old_value=None, new_value=summary)],
            metadata=meta,
            performed_by=performed_by,
        ))


# ============================================================
# QUERIES
# ============================================================
def get_audit_logs(filters: AuditLogFilters) -> dict:
    """
    Filtered, newest-first page of audit entries.
    Database errors propagate to the handler.
    """
    page = max(filters.page, 1)
    limit = min(max(filters.limit, 1), settings.AUDIT_LOG_MAX_PAGE_SIZE)
    skip = (page - 1) * limit

    client = get_supabase_client()
    query = (
        client.table(AUDIT_TABLE)
        .select("*", count="exact")
        .eq("site_id", filters.site_id)
    )

    if filters.action:
        query = query.eq("action", filters.action.value)
    if filters.entity_type:
        query = query.eq("entity_type", filters.entity_type.value)
    if filters.path:
        query = query.ilike("path", f"%{filters.path}%")
    if filters.performed_by:
        query = query.eq("performed_by", filters.performed_by)
    if filters.date_from:
        query = query.gte("performed_at", filters.date_from.isoformat())
    if filters.date_to:
        query = query.lte("performed_at", filters.date_to.isoformat())

    res = (
        query.order("performed_at", desc=True)
        .range(skip, skip + limit - 1)
        .execute()
    )

    logs = res.data or []
    total = res.count if res.count is not None else len(logs)

    return {
        "logs": logs,
        "pagination": Pagination.build(page, limit, total).model_dump(),
    }


def _lookup_email(client, user_id: str) -> str:
    try:
        resp = client.auth.admin.get_user_by_id(user_id)
        return resp.user.email if resp and resp.user else "Unknown"
    except Exception as e:
        logger.warning(f"Could not resolve audit user {user_id}: {e}")
        return "Unknown"


def get_audit_stats(site_id: str, days: int = 30, *, clock: Callable = utc_now) -> dict:
    """Counts over the last `days` days: total, pages touched, per action, top 5 users."""
    date_from = clock() - timedelta(days=days)

    client = get_supabase_client()
    res = (
        client.table(AUDIT_TABLE)
        .select("action,path,performed_by")
        .eq("site_id", site_id)
        .gte("performed_at", date_from.isoformat())
        .execute()
    )
    rows = res.data or []

    action_breakdown = Counter(row.get("action") for row in rows)
    unique_pages = {row.get("path") for row in rows if row.get("path")}
    per_user = Counter(row.get("performed_by") for row in rows if row.get("performed_by"))

    top_users = [
        {
            "user_id": user_id,
            "email": _lookup_email(client, user_id),
            "change_count": count,
        }
        for user_id, count in per_user.most_common(5)
    ]

    return {
        "total_changes": len(rows),
        "unique_pages_modified": len(unique_pages),
        "action_breakdown": dict(action_breakdown),
        "top_users": top_users,
    }
