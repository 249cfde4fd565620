from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import BaseModel

from core.supabase_client import get_supabase_client
from core.permission_helpers import (
    can_access_page,
    get_effective_permissions,
    get_permission_description,
    permission_matrix,
)
from core.permissions import ADMIN_PAGES
from core.utils import request_metadata
from dependencies.auth import get_current_user, CurrentUser
from core.logging_config import logger
from models.enums import ActivityCategory, AdminPage
from services.activity_logger import log_activity


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# MODELS
# ============================================================
class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


# ============================================================
# LOGIN (SUPABASE AUTH)
# ============================================================
@router.post("/login", response_model=TokenResponse, summary="Authenticate admin user")
def login(payload: LoginRequest, request: Request):

    email = payload.email.strip().lower()

    client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    try:
        response = client.auth.sign_in_with_password(
            {"email": email, "password": payload.password}
        )
    except Exception as e:
        logger.warning(f"Login attempt failed for {email}: {type(e).__name__}")
        raise HTTPException(
            status_code=401,
            detail="Invalid email or password"
        )

    if not response.session or not response.session.access_token:
        raise HTTPException(401, "Invalid email or password")

    metadata = response.user.user_metadata or {}
    if metadata.get("status") == "inactive":
        raise HTTPException(403, "Account is inactive")

    user = CurrentUser(
        id=response.user.id,
        email=response.user.email or email,
        role=metadata.get("role", "custom"),
        name=metadata.get("name"),
    )
    log_activity(user, "login", ActivityCategory.auth, request_meta=request_metadata(request))

    return TokenResponse(access_token=response.session.access_token)


# ============================================================
# CURRENT USER
# ============================================================
@router.get("/me", response_model=CurrentUser, summary="Current authenticated user")
def read_me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user


@router.get("/me/permissions", summary="Permission matrix for the current user")
def read_my_permissions(current_user: CurrentUser = Depends(get_current_user)):
    """
    Everything the admin UI needs to decide what to show: the resolved
    access level per page, which pages are visible, and the full
    page → {read, write, delete} matrix.
    """
    effective = get_effective_permissions(current_user.role, current_user.permissions)

    return {
        "success": True,
        "data": {
            "role": current_user.role,
            "effective_permissions": {page.value: level.value for page, level in effective.items()},
            "accessible_pages": [
                page.value for page in AdminPage
                if can_access_page(current_user.role, current_user.permissions, page)
            ],
            "matrix": permission_matrix(current_user.role, current_user.permissions),
            "pages": [
                {
                    "page": page.value,
                    "label": ADMIN_PAGES[page]["label"],
                    "level": level.value,
                    "level_description": get_permission_description(level),
                }
                for page, level in effective.items()
            ],
        },
    }
