# models/seo_page.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.enums import PageCategory


class OpenGraph(BaseModel):
    title: Optional[str] = Field(None, max_length=95)
    description: Optional[str] = Field(None, max_length=300)
    image: Optional[str] = None


class SEOPageBase(BaseModel):
    path: str = Field(..., min_length=1)
    slug: Optional[str] = None
    meta_title: Optional[str] = Field(None, max_length=70)
    meta_description: Optional[str] = Field(None, max_length=200)
    robots: str = "index,follow"
    page_category: PageCategory = PageCategory.other
    open_graph: Optional[OpenGraph] = None


class SEOPageUpsert(SEOPageBase):
    site_id: Optional[str] = None


class SEOPageRead(SEOPageBase):
    id: Optional[str] = None
    site_id: str
    is_custom: bool = True
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# -------------------------
# Bulk operations
# -------------------------
class BulkOperationRequest(BaseModel):
    """
    operation: bulk_update | bulk_delete | bulk_reset
    bulk_update uses `pages`; the other two use `paths`.
    """
    operation: str
    site_id: Optional[str] = None
    pages: List[SEOPageUpsert] = []
    paths: List[str] = []


class PerformanceAction(BaseModel):
    action: str
    site_id: Optional[str] = None
