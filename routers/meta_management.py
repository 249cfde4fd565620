# routers/meta_management.py

from datetime import datetime, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from core.cache import SimpleCache, get_cache
from core.config import settings
from core.errors import handle_supabase_error
from core.permission_helpers import requires_permission, user_has_permission
from core.utils import normalize_path, request_metadata, utc_now
from dependencies.auth import CurrentUser
from models.audit_log import AuditLogFilters
from models.enums import AdminPage, AuditAction, EntityType, PermissionAction
from models.seo_page import BulkOperationRequest, PerformanceAction, SEOPageUpsert
from services import audit_logger, seo_pages, seo_performance, sitemap


router = APIRouter(
    prefix="/admin/meta-management",
    tags=["Meta Management"],
)


# ============================================================
# LIST SEO PAGES
# ============================================================
@router.get(
    "",
    summary="List custom SEO pages",
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.read))],
)
def list_seo_pages(
    site_id: Optional[str] = None,
    category: Optional[str] = None,
):
    try:
        pages = seo_pages.list_pages(site_id or settings.DEFAULT_SITE_ID, category)
        return {"success": True, "data": pages}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch SEO pages")


# ============================================================
# AUDIT LOGS
# ============================================================
@router.get(
    "/audit-logs",
    summary="SEO audit log",
    description="""
    Newest-first audit entries for SEO changes.

    **Permissions:** Requires read access to `seo`.
    **Filtering:** action, entity_type, path (case-insensitive substring), performed_by,
    date_from / date_to (date_to is inclusive to end of day).
    **Paging:** `limit` is capped at 100.
    """,
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.read))],
)
def list_audit_logs(
    site_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.AUDIT_LOG_DEFAULT_PAGE_SIZE, ge=1),
    action: Optional[AuditAction] = None,
    entity_type: Optional[EntityType] = None,
    path: Optional[str] = None,
    performed_by: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
):
    if date_to is not None and date_to.time() == time(0, 0):
        date_to = datetime.combine(date_to.date(), time.max, tzinfo=date_to.tzinfo)

    filters = AuditLogFilters(
        site_id=site_id or settings.DEFAULT_SITE_ID,
        page=page,
        limit=min(limit, settings.AUDIT_LOG_MAX_PAGE_SIZE),
        action=action,
        entity_type=entity_type,
        path=path,
        performed_by=performed_by,
        date_from=date_from,
        date_to=date_to,
    )

    try:
        return {"success": True, "data": audit_logger.get_audit_logs(filters)}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch audit logs")


@router.get(
    "/audit-logs/stats",
    summary="SEO audit statistics",
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.read))],
)
def audit_log_stats(
    site_id: Optional[str] = None,
    days: int = Query(30, ge=1, le=365),
):
    try:
        stats = audit_logger.get_audit_stats(site_id or settings.DEFAULT_SITE_ID, days)
        return {"success": True, "data": stats}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch audit statistics")


# ============================================================
# PERFORMANCE REPORT (cached)
# ============================================================
@router.get(
    "/performance",
    summary="SEO performance report",
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.read))],
)
def performance_report(
    site_id: Optional[str] = None,
    cache: SimpleCache = Depends(get_cache),
):
    try:
        report = seo_performance.get_performance_report(site_id or settings.DEFAULT_SITE_ID, cache)
        return {"success": True, "data": report}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch performance statistics")


@router.post(
    "/performance",
    summary="Clear or refresh the performance cache",
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.write))],
)
def performance_action(
    payload: PerformanceAction,
    cache: SimpleCache = Depends(get_cache),
):
    message = seo_performance.apply_cache_action(payload.action, cache, payload.site_id)
    if message is None:
        raise HTTPException(400, f"Unknown action: {payload.action}")
    return {"success": True, "data": {"message": message, "timestamp": utc_now().isoformat()}}


# ============================================================
# SITEMAP
# ============================================================
@router.get(
    "/sitemap",
    summary="Sitemap of predefined and custom SEO pages",
    description="""
    Every predefined page plus the custom SEO pages of the site, highest
    priority first. `format=xml` returns the sitemap document itself.
    """,
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.read))],
)
def read_sitemap(
    site_id: Optional[str] = None,
    format: str = Query("json", pattern="^(json|xml)$"),
):
    try:
        entries = sitemap.get_sitemap(site_id or settings.DEFAULT_SITE_ID)
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch sitemap information")

    if format == "xml":
        return Response(content=sitemap.render_xml(entries), media_type="application/xml")

    return {
        "success": True,
        "data": {
            "stats": sitemap.sitemap_stats(entries),
            "entries": entries,
        },
    }


# ============================================================
# BULK OPERATIONS
# ============================================================
@router.post(
    "/bulk",
    summary="Bulk update / delete / reset SEO pages",
)
def bulk_seo_operation(
    payload: BulkOperationRequest,
    request: Request,
    cache: SimpleCache = Depends(get_cache),
    current_user: CurrentUser = Depends(requires_permission(AdminPage.seo, PermissionAction.write)),
):
    if payload.operation in ("bulk_delete", "bulkDelete"):
        if not user_has_permission(current_user, AdminPage.seo, PermissionAction.delete):
            raise HTTPException(403, "Insufficient permissions: delete access to 'seo' required")

    try:
        result = seo_pages.bulk_operation(payload, current_user, request_metadata(request))
    except Exception as e:
        raise handle_supabase_error(e, "Failed to run bulk operation")

    cache.delete_prefix("performance:")
    return {"success": True, "data": result}


# ============================================================
# UPSERT SEO PAGE
# ============================================================
@router.post(
    "",
    summary="Create or update an SEO page",
    description="""
    Upserts the page keyed by (site_id, path) and records the field-level
    changes in the SEO audit log. A slug change also creates a 301 redirect.
    Audit failures never fail the request.
    """,
)
def upsert_seo_page(
    payload: SEOPageUpsert,
    request: Request,
    cache: SimpleCache = Depends(get_cache),
    current_user: CurrentUser = Depends(requires_permission(AdminPage.seo, PermissionAction.write)),
):
    try:
        result = seo_pages.upsert_seo_page(payload, current_user, request_metadata(request))
    except Exception as e:
        raise handle_supabase_error(e, "Failed to save SEO page")

    cache.delete(seo_performance.cache_key_for(result["page"].get("site_id") or settings.DEFAULT_SITE_ID))
    return {"success": True, "data": result["page"], "action": result["action"]}


# ============================================================
# GET / RESET ONE PAGE  (path may contain slashes)
# ============================================================
@router.get(
    "/pages/{path:path}",
    summary="Get one SEO page",
    dependencies=[Depends(requires_permission(AdminPage.seo, PermissionAction.read))],
)
def get_seo_page(path: str, site_id: Optional[str] = None):
    try:
        page = seo_pages.find_page(site_id or settings.DEFAULT_SITE_ID, normalize_path(path))
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch SEO page")

    if page is None:
        raise HTTPException(404, "SEO page not found")
    return {"success": True, "data": page}


@router.delete(
    "/pages/{path:path}",
    summary="Reset an SEO page to its defaults",
)
def reset_seo_page(
    path: str,
    request: Request,
    site_id: Optional[str] = None,
    cache: SimpleCache = Depends(get_cache),
    current_user: CurrentUser = Depends(requires_permission(AdminPage.seo, PermissionAction.delete)),
):
    try:
        deleted = seo_pages.reset_seo_page(site_id, path, current_user, request_metadata(request))
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete SEO page")

    cache.delete(seo_performance.cache_key_for(site_id or settings.DEFAULT_SITE_ID))
    return {"success": True, "data": {"message": "SEO page deleted successfully", "path": deleted.get("path")}}
