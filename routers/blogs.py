# routers/blogs.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from core.errors import handle_supabase_error
from core.permission_helpers import requires_permission
from core.supabase_client import get_supabase_client
from core.utils import clean_slug, request_metadata, sanitize, utc_now
from dependencies.auth import CurrentUser
from models.blog import BlogCreate, BlogUpdate
from models.enums import ActivityCategory, AdminPage, BlogStatus, PermissionAction
from services.activity_logger import log_activity


router = APIRouter(
    prefix="/admin/blogs",
    tags=["Blogs"],
)

BLOG_TABLE = "blog_posts"


def _fetch_blog(client, blog_id: str) -> dict:
    res = client.table(BLOG_TABLE).select("*").eq("id", blog_id).limit(1).execute()
    if not res.data:
        raise HTTPException(404, "Blog post not found")
    return res.data[0]


# -----------------------------------------------------
# LIST
# -----------------------------------------------------
@router.get(
    "",
    summary="List blog posts",
    dependencies=[Depends(requires_permission(AdminPage.blogs, PermissionAction.read))],
)
def list_blogs(
    status: Optional[BlogStatus] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    skip = (page - 1) * limit
    try:
        client = get_supabase_client()
        query = client.table(BLOG_TABLE).select("*", count="exact")
        if status:
            query = query.eq("status", status.value)
        if search:
            query = query.ilike("title", f"%{search}%")
        res = query.order("created_at", desc=True).range(skip, skip + limit - 1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch blog posts")

    return {"success": True, "data": res.data or [], "total": res.count}


# -----------------------------------------------------
# GET
# -----------------------------------------------------
@router.get(
    "/{blog_id}",
    summary="Get blog post",
    dependencies=[Depends(requires_permission(AdminPage.blogs, PermissionAction.read))],
)
def get_blog(blog_id: str):
    try:
        return {"success": True, "data": _fetch_blog(get_supabase_client(), blog_id)}
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch blog post")


# -----------------------------------------------------
# CREATE
# -----------------------------------------------------
@router.post("", summary="Create blog post")
def create_blog(
    payload: BlogCreate,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.blogs, PermissionAction.write)),
):
    row = sanitize(payload.model_dump(mode="json"))
    row["slug"] = clean_slug(payload.slug or payload.title)
    if not row["slug"]:
        raise HTTPException(400, "Blog slug could not be derived from the title")
    row["author"] = row.get("author") or current_user.display_name
    row["created_by"] = current_user.id
    if payload.status is BlogStatus.published:
        row["published_at"] = utc_now().isoformat()

    try:
        res = get_supabase_client().table(BLOG_TABLE).insert(row).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create blog post")

    created = res.data[0] if res.data else row

    log_activity(
        current_user, "blog_created", ActivityCategory.blog,
        details={"blog_id": created.get("id"), "title": created.get("title")},
        request_meta=request_metadata(request),
    )
    return {"success": True, "data": created}


# -----------------------------------------------------
# UPDATE
# -----------------------------------------------------
@router.patch("/{blog_id}", summary="Update blog post")
def update_blog(
    blog_id: str,
    payload: BlogUpdate,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.blogs, PermissionAction.write)),
):
    updates = sanitize(payload.model_dump(mode="json", exclude_unset=True))
    if not updates:
        raise HTTPException(400, "No fields provided to update.")
    if "slug" in updates:
        updates["slug"] = clean_slug(updates["slug"])

    try:
        client = get_supabase_client()
        existing = _fetch_blog(client, blog_id)

        if updates.get("status") == BlogStatus.published.value and existing.get("status") != BlogStatus.published.value:
            updates["published_at"] = utc_now().isoformat()
        updates["updated_at"] = utc_now().isoformat()

        res = client.table(BLOG_TABLE).update(updates).eq("id", blog_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update blog post")

    log_activity(
        current_user, "blog_updated", ActivityCategory.blog,
        details={"blog_id": blog_id, "fields": sorted(k for k in updates if k != "updated_at")},
        request_meta=request_metadata(request),
    )
    return {"success": True, "data": res.data[0] if res.data else {**existing, **updates}}


# -----------------------------------------------------
# DELETE
# -----------------------------------------------------
@router.delete("/{blog_id}", summary="Delete blog post")
def delete_blog(
    blog_id: str,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.blogs, PermissionAction.delete)),
):
    try:
        client = get_supabase_client()
        existing = _fetch_blog(client, blog_id)
        client.table(BLOG_TABLE).delete().eq("id", blog_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete blog post")

    log_activity(
        current_user, "blog_deleted", ActivityCategory.blog,
        details={"blog_id": blog_id, "title": existing.get("title")},
        request_meta=request_metadata(request),
    )
    return {"success": True, "data": {"id": blog_id}}
