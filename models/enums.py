from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ADMIN ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Role attached to every admin user."""

    admin = "admin"
    seo = "seo"
    custom = "custom"


# -----------------------------------------------------
# ACCESS LEVEL
# -----------------------------------------------------
class AccessLevel(BaseStrEnum):
    """Per-page access level, ordered none < read < write < full."""

    none = "none"
    read = "read"
    write = "write"
    full = "full"

    @property
    def rank(self) -> int:
        return _ACCESS_RANK[self]


_ACCESS_RANK = {
    AccessLevel.none: 0,
    AccessLevel.read: 1,
    AccessLevel.write: 2,
    AccessLevel.full: 3,
}


# -----------------------------------------------------
# PERMISSION ACTION
# -----------------------------------------------------
class PermissionAction(BaseStrEnum):
    """Action requested against an admin page."""

    read = "read"
    write = "write"
    delete = "delete"


# -----------------------------------------------------
# ADMIN PAGE
# -----------------------------------------------------
class AdminPage(BaseStrEnum):
    """Admin-panel section used as the unit of access control."""

    dashboard = "dashboard"
    blogs = "blogs"
    staff = "staff"
    users = "users"
    messages = "messages"
    settings = "settings"
    activity = "activity"
    seo = "seo"
    services = "services"


# -----------------------------------------------------
# USER STATUS
# -----------------------------------------------------
class UserStatus(BaseStrEnum):
    active = "active"
    inactive = "inactive"


# -----------------------------------------------------
# AUDIT ACTION
# -----------------------------------------------------
class AuditAction(BaseStrEnum):
    """Kind of mutation recorded in the SEO audit log."""

    create = "create"
    update = "update"
    delete = "delete"
    reset = "reset"
    bulk_update = "bulk_update"
    bulk_delete = "bulk_delete"
    bulk_reset = "bulk_reset"
    slug_change = "slug_change"
    redirect_create = "redirect_create"


BULK_ACTIONS = (AuditAction.bulk_update, AuditAction.bulk_delete, AuditAction.bulk_reset)


# -----------------------------------------------------
# AUDIT ENTITY TYPE
# -----------------------------------------------------
class EntityType(BaseStrEnum):
    seo_page = "seo_page"
    redirect = "redirect"
    blog = "blog"
    staff = "staff"
    admin_user = "admin_user"


# -----------------------------------------------------
# ACTIVITY CATEGORY
# -----------------------------------------------------
class ActivityCategory(BaseStrEnum):
    auth = "auth"
    user = "user"
    blog = "blog"
    staff = "staff"
    seo = "seo"
    image = "image"
    category = "category"
    settings = "settings"
    system = "system"


# -----------------------------------------------------
# PAGE CATEGORY (SEO)
# -----------------------------------------------------
class PageCategory(BaseStrEnum):
    main = "main"
    services = "services"
    blog = "blog"
    about = "about"
    contact = "contact"
    other = "other"


# -----------------------------------------------------
# BLOG STATUS
# -----------------------------------------------------
class BlogStatus(BaseStrEnum):
    draft = "draft"
    published = "published"
    archived = "archived"
