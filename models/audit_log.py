# models/audit_log.py

from typing import Any, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.enums import AuditAction, EntityType


# ===============================================================
# CHANGE RECORD (transient, never stored on its own)
# ===============================================================

class FieldChange(BaseModel):
    field: str
    old_value: Any = None
    new_value: Any = None


# ===============================================================
# AUDIT LOG ENTRY
# ===============================================================

class AuditMetadata(BaseModel):
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    bulk_operation: bool = False
    affected_paths: List[str] = []
    redirect_created: bool = False


class AuditLogCreate(BaseModel):
    """
    Everything the caller knows about a mutation.
    `performed_at` is stamped by the recorder, not the caller.
    """
    site_id: str
    action: AuditAction
    entity_type: EntityType
    entity_id: Optional[str] = None
    path: Optional[str] = None
    old_slug: Optional[str] = None
    new_slug: Optional[str] = None
    changes: List[FieldChange] = []
    metadata: AuditMetadata = Field(default_factory=AuditMetadata)
    performed_by: str


class AuditLogRead(AuditLogCreate):
    """Row as stored in `seo_audit_logs`; immutable once written."""
    model_config = {"frozen": True}

    id: Optional[str] = None
    performed_at: datetime


class AuditOutcome(BaseModel):
    """
    Result of a best-effort audit write.
    Callers are free to ignore it; a failed write never raises.
    """
    recorded: bool
    entry_id: Optional[str] = None
    error: Optional[str] = None


# ===============================================================
# QUERY MODELS
# ===============================================================

class AuditLogFilters(BaseModel):
    site_id: str
    page: int = 1
    limit: int = 20
    action: Optional[AuditAction] = None
    entity_type: Optional[EntityType] = None
    path: Optional[str] = None
    performed_by: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = -(-total // limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )
