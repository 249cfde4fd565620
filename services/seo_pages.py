# services/seo_pages.py

"""
SEO page writes with audit trail.

Flow for every mutation: primary write first, then the audit entry.
Database errors on the primary write propagate; audit failures never do.
"""

from typing import List, Optional

from fastapi import HTTPException

from core.config import settings
from core.permissions import BULK_OPERATION_LIMITS, DEFAULT_BULK_OPERATION_LIMITS
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from core.utils import clean_slug, normalize_path, sanitize, utc_now
from dependencies.auth import CurrentUser
from models.enums import AuditAction, Role
from models.seo_page import BulkOperationRequest, SEOPageUpsert
from services.audit_logger import SEOAuditLogger


SEO_TABLE = "seo_pages"
REDIRECT_TABLE = "redirects"
UPSERT_CONFLICT = "site_id,path"

BULK_OPERATION_ALIASES = {
    "bulkUpdate": AuditAction.bulk_update,
    "bulkDelete": AuditAction.bulk_delete,
    "bulkReset": AuditAction.bulk_reset,
    "bulk_update": AuditAction.bulk_update,
    "bulk_delete": AuditAction.bulk_delete,
    "bulk_reset": AuditAction.bulk_reset,
}


def _resolve_site(site_id: Optional[str]) -> str:
    return site_id or settings.DEFAULT_SITE_ID


def build_page_row(payload: SEOPageUpsert, user: CurrentUser) -> dict:
    """Clean an incoming payload into the row stored in `seo_pages`."""
    path = normalize_path(payload.path)
    if not path:
        raise HTTPException(400, "Page path is required")

    open_graph = None
    if payload.open_graph is not None:
        open_graph = sanitize(payload.open_graph.model_dump())
        if not any(open_graph.values()):
            open_graph = None

    fields = sanitize({
        "meta_title": payload.meta_title,
        "meta_description": payload.meta_description,
        "robots": payload.robots,
    })

    return {
        "site_id": _resolve_site(payload.site_id),
        "path": path,
        "slug": clean_slug(payload.slug),
        "meta_title": fields["meta_title"],
        "meta_description": fields["meta_description"],
        "robots": fields["robots"] or "index,follow",
        "page_category": payload.page_category.value,
        "open_graph": open_graph,
        "is_custom": True,
        "updated_by": user.id,
        "updated_at": utc_now().isoformat(),
    }


def find_page(site_id: str, path: str) -> Optional[dict]:
    client = get_supabase_client()
    res = (
        client.table(SEO_TABLE)
        .select("*")
        .eq("site_id", site_id)
        .eq("path", path)
        .limit(1)
        .execute()
    )
    return res.data[0] if res.data else None


def list_pages(site_id: str, category: Optional[str] = None) -> List[dict]:
    client = get_supabase_client()
    query = client.table(SEO_TABLE).select("*").eq("site_id", site_id)
    if category:
        query = query.eq("page_category", category)
    res = query.order("path").execute()
    return res.data or []


def _create_redirect(site_id: str, old_slug: str, new_slug: str, user: CurrentUser, request_meta: dict) -> bool:
    """301 from the old slug to the new one. Failure is logged, not raised."""
    from_path, to_path = f"/{old_slug}", f"/{new_slug}"
    try:
        client = get_supabase_client()
        res = client.table(REDIRECT_TABLE).insert({
            "site_id": site_id,
            "from_path": from_path,
            "to_path": to_path,
            "status_code": 301,
            "created_by": user.id,
        }).execute()
    except Exception as e:
        logger.warning(f"Redirect {from_path} -> {to_path} not created: {e}")
        return False

    entity_id = None
    if res.data and res.data[0].get("id") is not None:
        entity_id = str(res.data[0]["id"])

    SEOAuditLogger.log_redirect_create(
        site_id, from_path, to_path, 301, user.id,
        entity_id=entity_id, metadata=request_meta,
    )
    return True


def upsert_seo_page(payload: SEOPageUpsert, user: CurrentUser, request_meta: Optional[dict] = None) -> dict:
    request_meta = request_meta or {}
    row = build_page_row(payload, user)
    site_id, path = row["site_id"], row["path"]

    existing = find_page(site_id, path)
    if existing is None:
        row["created_by"] = user.id

    client = get_supabase_client()
    res = client.table(SEO_TABLE).upsert(row, on_conflict=UPSERT_CONFLICT).execute()
    saved = res.data[0] if res.data else row
    entity_id = str(saved["id"]) if saved.get("id") is not None else None

    if existing is None:
        outcome = SEOAuditLogger.log_seo_page_create(
            site_id, path, row, user.id, entity_id=entity_id, metadata=request_meta,
        )
    else:
        outcome = SEOAuditLogger.log_seo_page_update(
            site_id, path, existing, row, user.id, entity_id=entity_id, metadata=request_meta,
        )

        old_slug, new_slug = existing.get("slug"), row["slug"]
        if old_slug and new_slug and old_slug != new_slug:
            redirected = _create_redirect(site_id, old_slug, new_slug, user, request_meta)
            SEOAuditLogger.log_slug_change(
                site_id, path, old_slug, new_slug, redirected, user.id, metadata=request_meta,
            )

    action = "create" if existing is None else "update"
    logger.info(
        f"SEO page saved: path={path} action={action} user={user.id} "
        f"audited={bool(outcome and outcome.recorded)}"
    )
    return {"page": saved, "action": action}


def reset_seo_page(site_id: str, path: str, user: CurrentUser, request_meta: Optional[dict] = None) -> dict:
    """Drop the custom row so the page falls back to its defaults."""
    site_id = _resolve_site(site_id)
    path = normalize_path(path)

    client = get_supabase_client()
    res = (
        client.table(SEO_TABLE)
        .delete()
        .eq("site_id", site_id)
        .eq("path", path)
        .execute()
    )
    if not res.data:
        raise HTTPException(404, "SEO page not found")

    deleted = res.data[0]
    SEOAuditLogger.log_seo_page_delete(
        site_id, path, deleted, user.id,
        is_reset=True,
        entity_id=str(deleted["id"]) if deleted.get("id") is not None else None,
        metadata=request_meta,
    )

    logger.info(f"SEO page reset: path={path} user={user.id}")
    return deleted


def check_bulk_limit(action: AuditAction, count: int, role: str):
    """Reject bulk requests larger than the caller's role allows."""
    kind = action.value.replace("bulk_", "")
    limits = DEFAULT_BULK_OPERATION_LIMITS
    if role in Role.list():
        limits = BULK_OPERATION_LIMITS.get(Role(role), DEFAULT_BULK_OPERATION_LIMITS)

    limit = limits[kind]
    if count > limit:
        raise HTTPException(400, f"Bulk {kind} limited to {limit} items for {role} role")


def _dedupe_by_path(rows: List[dict]) -> List[dict]:
    """One row per path, the last one sent wins."""
    by_path = {}
    for row in rows:
        by_path[row["path"]] = row
    return list(by_path.values())


def bulk_operation(payload: BulkOperationRequest, user: CurrentUser, request_meta: Optional[dict] = None) -> dict:
    action = BULK_OPERATION_ALIASES.get(payload.operation)
    if action is None:
        raise HTTPException(400, "Invalid bulk operation")

    site_id = _resolve_site(payload.site_id)
    client = get_supabase_client()

    if action is AuditAction.bulk_update:
        if not payload.pages:
            raise HTTPException(400, "No pages provided")
        check_bulk_limit(action, len(payload.pages), user.role)
        rows = []
        for page in payload.pages:
            row = build_page_row(page, user)
            row["site_id"] = site_id
            rows.append(row)
        rows = _dedupe_by_path(rows)
        res = client.table(SEO_TABLE).upsert(rows, on_conflict=UPSERT_CONFLICT).execute()
        affected_paths = [row["path"] for row in rows]
        summary = {"updated": len(res.data or rows)}

    else:
        paths = list(dict.fromkeys(normalize_path(p) for p in payload.paths if p))
        if not paths:
            raise HTTPException(400, "No paths provided")
        check_bulk_limit(action, len(paths), user.role)
        query = client.table(SEO_TABLE).delete().eq("site_id", site_id).in_("path", paths)
        if action is AuditAction.bulk_reset:
            query = query.eq("is_custom", True)
        res = query.execute()
        affected_paths = paths
        summary = {"deleted": len(res.data or [])}

    SEOAuditLogger.log_bulk_operation(
        site_id, action, affected_paths, summary, user.id, metadata=request_meta,
    )

    logger.info(f"Bulk {action.value} completed: {summary} user={user.id}")
    return {"operation": action.value, "affected_paths": affected_paths, "result": summary}
