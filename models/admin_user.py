# models/admin_user.py

from typing import Dict, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from models.enums import Role, UserStatus


# ===============================================================
# ADMIN USER MODELS (Supabase Auth users + user_metadata)
# ===============================================================

class AdminUserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    password: Optional[str] = Field(None, min_length=6)
    role: Role = Role.custom
    status: UserStatus = UserStatus.active
    permissions: Optional[Dict[str, str]] = None


class AdminUserUpdate(BaseModel):
    """Partial update; only provided fields are merged into metadata."""
    name: Optional[str] = None
    role: Optional[Role] = None
    status: Optional[UserStatus] = None
    permissions: Optional[Dict[str, str]] = None


class AdminUserRead(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str
    status: str = UserStatus.active.value
    permissions: Dict[str, str] = {}
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
