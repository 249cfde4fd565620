# routers/admin.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from dependencies.auth import CurrentUser
from core.permission_helpers import requires_permission, validate_permissions
from core.supabase_client import get_supabase_client
from core.logging_config import logger
from core.utils import request_metadata
from models.admin_user import AdminUserCreate, AdminUserRead, AdminUserUpdate
from models.enums import ActivityCategory, AdminPage, PermissionAction, Role, UserStatus
from models.principal import coerce_permission_map
from services.activity_logger import log_activity


router = APIRouter(
    prefix="/admin",
    tags=["Admin Users"],
)


# -----------------------------------------------------
# Normalize Supabase list_users() result
# -----------------------------------------------------
def extract_user_list(result):
    if isinstance(result, list):
        return result
    if isinstance(result, dict) and "users" in result:
        return result["users"]
    users_attr = getattr(result, "users", None)
    if users_attr is not None:
        return users_attr
    return []


def to_admin_user(u) -> AdminUserRead:
    meta = u.user_metadata or {}
    role = meta.get("role", Role.custom.value)
    permissions = {
        page.value: level.value
        for page, level in coerce_permission_map(meta.get("permissions")).items()
    }

    return AdminUserRead(
        id=u.id,
        email=u.email,
        name=meta.get("name"),
        role=role,
        status=meta.get("status", UserStatus.active.value),
        permissions=permissions,
        created_at=getattr(u, "created_at", None),
        last_sign_in_at=getattr(u, "last_sign_in_at", None),
    )


def stored_permissions(role: Role, permissions) -> dict:
    """Only the custom role keeps a stored map; admin/seo resolve from built-ins."""
    if role is Role.custom:
        return validate_permissions(permissions)
    return {}


def _all_users(client):
    try:
        return extract_user_list(client.auth.admin.list_users())
    except Exception as e:
        logger.error(f"Supabase list users failed: {e}")
        raise HTTPException(500, "Failed to read admin users")


# -----------------------------------------------------
# Prevent losing the last active admin
# -----------------------------------------------------
def prevent_removing_last_admin(client, user_id: str):
    admin_ids = [
        u.id for u in _all_users(client)
        if (u.user_metadata or {}).get("role") == Role.admin.value
        and (u.user_metadata or {}).get("status", UserStatus.active.value) == UserStatus.active.value
    ]

    if user_id in admin_ids and len(admin_ids) == 1:
        raise HTTPException(400, "Cannot remove the last remaining admin.")


# -----------------------------------------------------
# CREATE USER
# -----------------------------------------------------
@router.post(
    "/users",
    summary="Admin: Create admin user",
)
def create_admin_user(
    payload: AdminUserCreate,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.users, PermissionAction.write)),
):
    client = get_supabase_client()

    metadata = {
        "name": payload.name.strip(),
        "role": payload.role.value,
        "status": payload.status.value,
        "permissions": stored_permissions(payload.role, payload.permissions),
    }

    create_payload = {
        "email": payload.email,
        "email_confirm": True,
        "user_metadata": metadata,
    }
    if payload.password:
        create_payload["password"] = payload.password

    try:
        user_resp = client.auth.admin.create_user(create_payload)
    except Exception as e:
        msg = str(e).lower()
        if "already" in msg and "registered" in msg:
            raise HTTPException(400, "A user with this email already exists")
        logger.error(f"Supabase user creation failed: {e}")
        raise HTTPException(500, "Failed to create user")

    new_user = to_admin_user(user_resp.user)

    log_activity(
        current_user, "user_created", ActivityCategory.user,
        details={"user_id": new_user.id, "email": new_user.email, "role": new_user.role},
        request_meta=request_metadata(request),
    )

    return {"success": True, "data": new_user.model_dump(mode="json")}


# -----------------------------------------------------
# LIST USERS
# -----------------------------------------------------
@router.get(
    "/users",
    summary="Admin: List admin users",
    dependencies=[Depends(requires_permission(AdminPage.users, PermissionAction.read))],
)
def list_admin_users(role: Optional[Role] = None, status: Optional[UserStatus] = None):
    client = get_supabase_client()

    results = []
    for u in _all_users(client):
        user = to_admin_user(u)
        if role is not None and user.role != role.value:
            continue
        if status is not None and user.status != status.value:
            continue
        results.append(user.model_dump(mode="json"))

    results.sort(key=lambda x: x.get("created_at") or "", reverse=True)

    return {"success": True, "data": results}


# -----------------------------------------------------
# GET USER
# -----------------------------------------------------
@router.get(
    "/users/{user_id}",
    summary="Admin: Get admin user",
    dependencies=[Depends(requires_permission(AdminPage.users, PermissionAction.read))],
)
def get_admin_user(user_id: str):
    client = get_supabase_client()

    try:
        resp = client.auth.admin.get_user_by_id(user_id)
    except Exception:
        raise HTTPException(404, "User not found")

    if not resp or not resp.user:
        raise HTTPException(404, "User not found")

    return {"success": True, "data": to_admin_user(resp.user).model_dump(mode="json")}


# -----------------------------------------------------
# UPDATE USER
# -----------------------------------------------------
@router.patch(
    "/users/{user_id}",
    summary="Admin: Update admin user",
)
def update_admin_user(
    user_id: str,
    payload: AdminUserUpdate,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.users, PermissionAction.write)),
):
    updates = payload.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(400, "No fields provided to update.")

    client = get_supabase_client()

    try:
        resp = client.auth.admin.get_user_by_id(user_id)
    except Exception:
        raise HTTPException(404, "User not found")

    if not resp or not resp.user:
        raise HTTPException(404, "User not found")

    current_meta = dict(resp.user.user_metadata or {})
    current_role = current_meta.get("role", Role.custom.value)

    if payload.role is not None:
        new_role = payload.role
    elif current_role in Role.list():
        new_role = Role(current_role)
    else:
        new_role = Role.custom
    new_status = payload.status.value if payload.status else current_meta.get("status", UserStatus.active.value)

    demoted = current_role == Role.admin.value and (
        new_role is not Role.admin or new_status != UserStatus.active.value
    )
    if demoted:
        if user_id == current_user.id:
            raise HTTPException(400, "You cannot remove your own admin access.")
        prevent_removing_last_admin(client, user_id)

    merged = dict(current_meta)
    if payload.name is not None:
        merged["name"] = payload.name.strip()
    merged["role"] = new_role.value
    merged["status"] = new_status

    if payload.permissions is not None or payload.role is not None:
        source = payload.permissions if payload.permissions is not None else current_meta.get("permissions")
        merged["permissions"] = stored_permissions(new_role, source)

    try:
        updated = client.auth.admin.update_user_by_id(user_id, {"user_metadata": merged})
    except Exception as e:
        logger.error(f"Failed to update user {user_id}: {e}")
        raise HTTPException(500, "Failed to update user")

    log_activity(
        current_user, "user_updated", ActivityCategory.user,
        details={"user_id": user_id, "fields": sorted(updates.keys())},
        request_meta=request_metadata(request),
    )

    user = getattr(updated, "user", None) or resp.user
    user.user_metadata = merged

    return {"success": True, "data": to_admin_user(user).model_dump(mode="json")}


# -----------------------------------------------------
# DELETE USER: SAFE
# -----------------------------------------------------
@router.delete(
    "/users/{user_id}",
    summary="Admin: Delete admin user",
)
def delete_admin_user(
    user_id: str,
    request: Request,
    current_user: CurrentUser = Depends(requires_permission(AdminPage.users, PermissionAction.delete)),
):
    if user_id == current_user.id:
        raise HTTPException(400, "You cannot delete your own account.")

    client = get_supabase_client()
    prevent_removing_last_admin(client, user_id)

    try:
        client.auth.admin.delete_user(user_id)
    except Exception as e:
        logger.error(f"Supabase delete error for {user_id}: {e}")
        raise HTTPException(500, "Failed to delete user")

    log_activity(
        current_user, "user_deleted", ActivityCategory.user,
        details={"user_id": user_id},
        request_meta=request_metadata(request),
    )

    return {"success": True, "data": {"user_id": user_id}}
