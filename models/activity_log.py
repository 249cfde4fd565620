# models/activity_log.py

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel

from models.enums import ActivityCategory


class ActivityLogCreate(BaseModel):
    user_id: str
    user_email: str
    user_name: str
    user_role: str
    action: str
    category: ActivityCategory
    details: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class ActivityLogFilters(BaseModel):
    page: int = 1
    limit: int = 20
    category: Optional[ActivityCategory] = None
    user_id: Optional[str] = None
    action: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
