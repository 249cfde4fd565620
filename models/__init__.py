# -------------------------
# Enums
# -------------------------
from .enums import (
    AccessLevel,
    ActivityCategory,
    AdminPage,
    AuditAction,
    BlogStatus,
    EntityType,
    PageCategory,
    PermissionAction,
    Role,
    UserStatus,
)

# -------------------------
# Principal (tagged by role)
# -------------------------
from .principal import (
    AdminPrincipal,
    CustomPrincipal,
    Principal,
    SeoPrincipal,
    build_principal,
)

# -------------------------
# Audit Log Models
# -------------------------
from .audit_log import (
    AuditLogCreate,
    AuditLogFilters,
    AuditLogRead,
    AuditMetadata,
    AuditOutcome,
    FieldChange,
    Pagination,
)

# -------------------------
# SEO Page Models
# -------------------------
from .seo_page import (
    BulkOperationRequest,
    OpenGraph,
    PerformanceAction,
    SEOPageRead,
    SEOPageUpsert,
)

# -------------------------
# Admin User Models (Supabase Auth)
# -------------------------
from .admin_user import (
    AdminUserCreate,
    AdminUserRead,
    AdminUserUpdate,
)

# -------------------------
# Content Models
# -------------------------
from .blog import BlogCreate, BlogRead, BlogUpdate
from .staff import StaffCreate, StaffRead, StaffUpdate

# -------------------------
# Activity Log Models
# -------------------------
from .activity_log import ActivityLogCreate, ActivityLogFilters

__all__ = [
    # enums
    "AccessLevel",
    "ActivityCategory",
    "AdminPage",
    "AuditAction",
    "BlogStatus",
    "EntityType",
    "PageCategory",
    "PermissionAction",
    "Role",
    "UserStatus",

    # principal
    "AdminPrincipal",
    "CustomPrincipal",
    "Principal",
    "SeoPrincipal",
    "build_principal",

    # audit
    "AuditLogCreate",
    "AuditLogFilters",
    "AuditLogRead",
    "AuditMetadata",
    "AuditOutcome",
    "FieldChange",
    "Pagination",

    # seo pages
    "BulkOperationRequest",
    "OpenGraph",
    "PerformanceAction",
    "SEOPageRead",
    "SEOPageUpsert",

    # admin users
    "AdminUserCreate",
    "AdminUserRead",
    "AdminUserUpdate",

    # content
    "BlogCreate",
    "BlogRead",
    "BlogUpdate",
    "StaffCreate",
    "StaffRead",
    "StaffUpdate",

    # activity
    "ActivityLogCreate",
    "ActivityLogFilters",
]
