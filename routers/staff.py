# routers/staff.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from core.errors import handle_supabase_error
from core.permission_helpers import requires_permission
from core.supabase_client import get_supabase_client
from core.utils import request_metadata, sanitize
from dependencies.auth import CurrentUser
from models.enums import ActivityCategory, AdminPage, PermissionAction
from models.staff import StaffCreate, StaffUpdate
from services.activity_logger import log_activity


router = APIRouter(
    prefix="/admin/staff",
    tags=["Staff"],
)

STAFF_TABLE = "staff"


# -----------------------------------------------------
# LIST / GET
# -----------------------------------------------------
@router.get(
    "",
    summary="List staff members",
    dependencies=[Depends(requires_permission(AdminPage.staff, PermissionAction.read))],
)
def list_staff(is_active: Optional[bool] = None):
    try:
        query = get_supabase_client().table(STAFF_TABLE).select("*")
        if is_active is not None:
            query = query.eq("is_active", is_active)
        res = query.order("order").execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch staff")

    return {"success": True, "data": res.data or []}


@router.get(
    "/{staff_id}",
    summary="Get staff member",
    dependencies=[Depends(requires_permission(AdminPage.staff, PermissionAction.read))],
)
def get_staff(staff_id: str):
    try:
        res = get_supabase_client().table(STAFF_TABLE).select("*").eq("id", staff_id).limit(1).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to fetch staff member")

    if not res.data:
        raise HTTPException(404, "Staff member not found")
    return {"success": True, "data": res.data[0]}


# -----------------------------------------------------
# CREATE / UPDATE / DELETE
# -----------------------------------------------------
@router.post("", summary="Create staff member")
def create_staff(
    payload: StaffCreate,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.staff, PermissionAction.write)),
):
    try:
        res = get_supabase_client().table(STAFF_TABLE).insert(sanitize(payload.model_dump())).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to create staff member")

    created = res.data[0] if res.data else payload.model_dump()
    log_activity(
        current_user, "staff_created", ActivityCategory.staff,
        details={"staff_id": created.get("id"), "name": created.get("name")},
        request_meta=request_metadata(request),
    )
    return {"success": True, "data": created}


@router.patch("/{staff_id}", summary="Update staff member")
def update_staff(
    staff_id: str,
    payload: StaffUpdate,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.staff, PermissionAction.write)),
):
    updates = sanitize(payload.model_dump(exclude_unset=True))
    if not updates:
        raise HTTPException(400, "No fields provided to update.")

    try:
        res = get_supabase_client().table(STAFF_TABLE).update(updates).eq("id", staff_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update staff member")

    if not res.data:
        raise HTTPException(404, "Staff member not found")

    log_activity(
        current_user, "staff_updated", ActivityCategory.staff,
        details={"staff_id": staff_id, "fields": sorted(updates.keys())},
        request_meta=request_metadata(request),
    )
    return {"success": True, "data": res.data[0]}


@router.delete("/{staff_id}", summary="Delete staff member")
def delete_staff(
    staff_id: str,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.staff, PermissionAction.delete)),
):
    try:
        res = get_supabase_client().table(STAFF_TABLE).delete().eq("id", staff_id).execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to delete staff member")

    if not res.data:
        raise HTTPException(404, "Staff member not found")

    log_activity(
        current_user, "staff_deleted", ActivityCategory.staff,
        details={"staff_id": staff_id, "name": res.data[0].get("name")},
        request_meta=request_metadata(request),
    )
    return {"success": True, "data": {"id": staff_id}}
