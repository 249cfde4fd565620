from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from supabase import Client

from core.supabase_client import get_supabase_client
from models.enums import Role, UserStatus


bearer_scheme = HTTPBearer()


# ============================================================
# Current User Model (session identity, trusted verbatim)
# ============================================================
class CurrentUser(BaseModel):
    id: str
    email: str
    role: str

    name: Optional[str] = None
    status: Optional[str] = UserStatus.active.value

    # Page → access level map as stored; only consulted for the custom role.
    # Values are not trusted here, the evaluator resolves malformed ones to none.
    permissions: Optional[Dict[str, Any]] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


# ============================================================
# AUTH DECODING (Supabase: validates JWT + reads metadata)
# ============================================================
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:

    token = credentials.credentials

    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    client: Client = get_supabase_client()
    if not client:
        raise HTTPException(500, "Supabase client not configured")

    # ---------------------------------------------------------
    # Validate JWT via Supabase GoTrue
    # ---------------------------------------------------------
    try:
        auth_resp = client.auth.get_user(token)
        if not auth_resp or not auth_resp.user:
            raise unauthorized
        auth_user = auth_resp.user
    except Exception:
        raise unauthorized

    email = auth_user.email
    metadata = auth_user.user_metadata or {}

    if not email:
        raise unauthorized

    if metadata.get("status") == UserStatus.inactive.value:
        raise HTTPException(status_code=403, detail="Account is inactive")

    # Unknown roles fall back to custom with no permissions
    role = metadata.get("role", Role.custom.value)
    if role not in Role.list():
        role = Role.custom.value

    permissions = metadata.get("permissions")
    if not isinstance(permissions, dict):
        permissions = None

    return CurrentUser(
        id=auth_user.id,
        email=email,
        role=role,
        name=metadata.get("name"),
        status=metadata.get("status", UserStatus.active.value),
        permissions=permissions,
    )

