# ============================================
# CENTRALIZED ROLE → PAGE ACCESS MAP
# ============================================
from models.enums import AccessLevel, AdminPage, PermissionAction, Role


# =====================================================
# ACCESS LEVEL CATALOG (labels shown in the user form)
# =====================================================
PERMISSION_LEVELS = {
    AccessLevel.none: {
        "label": "No Access",
        "description": "Cannot access this section",
    },
    AccessLevel.read: {
        "label": "Read Only",
        "description": "Can view but not modify",
    },
    AccessLevel.write: {
        "label": "Read & Write",
        "description": "Can view and modify but not delete",
    },
    AccessLevel.full: {
        "label": "Full Access",
        "description": "Can view, modify, and delete",
    },
}


# =====================================================
# KNOWN ADMIN PAGES
# =====================================================
ADMIN_PAGES = {
    AdminPage.dashboard: {"label": "Dashboard", "description": "Main admin dashboard"},
    AdminPage.blogs: {"label": "Blog Posts", "description": "Manage blog posts and content"},
    AdminPage.staff: {"label": "Staff Management", "description": "Manage team members"},
    AdminPage.users: {"label": "User Management", "description": "Manage admin users and permissions"},
    AdminPage.messages: {"label": "Messages", "description": "View and manage contact messages"},
    AdminPage.settings: {"label": "Settings", "description": "Account settings and preferences"},
    AdminPage.activity: {"label": "Activity Logs", "description": "View system activity and audit logs"},
    AdminPage.seo: {"label": "SEO / Meta Management", "description": "Manage page metadata and redirects"},
    AdminPage.services: {"label": "Services", "description": "Manage service pages"},
}


# =====================================================
# MINIMUM LEVEL REQUIRED PER ACTION
# =====================================================
ACTION_REQUIREMENTS = {
    PermissionAction.read: AccessLevel.read,
    PermissionAction.write: AccessLevel.write,
    PermissionAction.delete: AccessLevel.full,
}


# =====================================================
# SEO ROLE: content allow-list
# =====================================================
# Pages the seo role may read and write.
SEO_CONTENT_PAGES = frozenset({AdminPage.blogs, AdminPage.seo})

# Content pages where the seo role may also delete.
SEO_DELETE_PAGES = frozenset({AdminPage.blogs, AdminPage.seo})

# Pages hidden from the seo role entirely.
SEO_DENIED_PAGES = frozenset({AdminPage.users})


def _seo_level(page: AdminPage) -> AccessLevel:
    if page in SEO_DELETE_PAGES:
        return AccessLevel.full
    if page in SEO_CONTENT_PAGES:
        return AccessLevel.write
    if page in SEO_DENIED_PAGES:
        return AccessLevel.none
    return AccessLevel.read


ROLE_PERMISSIONS = {

    # =====================================================
    # ADMIN: Full access to everything
    # =====================================================
    Role.admin: {page: AccessLevel.full for page in AdminPage},

    # =====================================================
    # SEO: content pages editable, everything else read-only
    # =====================================================
    Role.seo: {page: _seo_level(page) for page in AdminPage},

    # =====================================================
    # CUSTOM: defaults for a freshly created custom user
    # =====================================================
    Role.custom: {
        AdminPage.dashboard: AccessLevel.read,
        AdminPage.blogs: AccessLevel.none,
        AdminPage.staff: AccessLevel.none,
        AdminPage.users: AccessLevel.none,
        AdminPage.messages: AccessLevel.none,
        AdminPage.settings: AccessLevel.full,
        AdminPage.activity: AccessLevel.none,
        AdminPage.seo: AccessLevel.none,
        AdminPage.services: AccessLevel.none,
    },
}

# Pages every custom map is pinned to, regardless of input.
PINNED_CUSTOM_PERMISSIONS = {
    AdminPage.dashboard: AccessLevel.read,
    AdminPage.settings: AccessLevel.full,
}


# =====================================================
# BULK OPERATIONS: max items per request, by role
# =====================================================
BULK_OPERATION_LIMITS = {
    Role.admin: {"update": 100, "delete": 50, "reset": 100},
    Role.seo: {"update": 20, "delete": 10, "reset": 20},
}

DEFAULT_BULK_OPERATION_LIMITS = {"update": 10, "delete": 5, "reset": 10}
