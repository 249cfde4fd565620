# models/staff.py

from typing import Optional
from pydantic import BaseModel, Field


class StaffBase(BaseModel):
    name: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    bio: Optional[str] = None
    image: Optional[str] = None
    linkedin: Optional[str] = None
    order: int = 0
    is_active: bool = True


class StaffCreate(StaffBase):
    pass


class StaffUpdate(BaseModel):
    name: Optional[str] = None
    position: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    linkedin: Optional[str] = None
    order: Optional[int] = None
    is_active: Optional[bool] = None


class StaffRead(StaffBase):
    id: str
