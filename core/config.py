from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Site Admin API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Admin panel domains (CORS is auto-built below)
    # -------------------------------------------------
    ADMIN_PANEL_DOMAIN: Optional[str] = None

    ADMIN_PANEL_DOMAINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Content
    # -------------------------------------------------
    DEFAULT_SITE_ID: str = "altiorainfotech"
    SITE_BASE_URL: str = "https://altiorainfotech.com"

    # -------------------------------------------------
    # Caching (process-local, best effort)
    # -------------------------------------------------
    PERFORMANCE_CACHE_TTL_SECONDS: int = Field(300, description="TTL for the SEO performance report")
    ACTIVITY_STATS_CACHE_TTL_SECONDS: int = Field(300, description="TTL for activity log statistics")

    # -------------------------------------------------
    # Audit log queries
    # -------------------------------------------------
    AUDIT_LOG_DEFAULT_PAGE_SIZE: int = 20
    AUDIT_LOG_MAX_PAGE_SIZE: int = 100

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

if settings.ADMIN_PANEL_DOMAIN:
    domain = settings.ADMIN_PANEL_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

cors_origins.extend([d.rstrip("/") for d in settings.ADMIN_PANEL_DOMAINS])

settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
