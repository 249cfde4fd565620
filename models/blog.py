# models/blog.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.enums import BlogStatus


class BlogBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    excerpt: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    author: Optional[str] = None
    categories: List[str] = []
    tags: List[str] = []
    featured_image: Optional[str] = None
    status: BlogStatus = BlogStatus.draft


class BlogCreate(BlogBase):
    pass


class BlogUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = None
    excerpt: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    author: Optional[str] = None
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    featured_image: Optional[str] = None
    status: Optional[BlogStatus] = None


class BlogRead(BlogBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
