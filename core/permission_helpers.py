from typing import Dict, Optional

from fastapi import Depends, HTTPException
from typing_extensions import assert_never

from core.permissions import (
    ACTION_REQUIREMENTS,
    PERMISSION_LEVELS,
    PINNED_CUSTOM_PERMISSIONS,
    ROLE_PERMISSIONS,
    SEO_CONTENT_PAGES,
    SEO_DELETE_PAGES,
    SEO_DENIED_PAGES,
)
from dependencies.auth import CurrentUser, get_current_user
from models.enums import AccessLevel, AdminPage, PermissionAction, Role
from models.principal import (
    AdminPrincipal,
    CustomPrincipal,
    SeoPrincipal,
    build_principal,
)


def _as_page(page) -> Optional[AdminPage]:
    try:
        return AdminPage(getattr(page, "value", page))
    except (ValueError, TypeError):
        return None


def _as_action(action) -> Optional[PermissionAction]:
    try:
        return PermissionAction(getattr(action, "value", action))
    except (ValueError, TypeError):
        return None


# -----------------------------------------------------
# Permission evaluation (single source for UI + server)
# -----------------------------------------------------
def principal_has_permission(principal, page, action) -> bool:
    page = _as_page(page)
    action = _as_action(action)
    if page is None or action is None:
        return False

    if isinstance(principal, AdminPrincipal):
        return True

    if isinstance(principal, SeoPrincipal):
        if page in SEO_DENIED_PAGES:
            return False
        if action is PermissionAction.delete:
            return page in SEO_DELETE_PAGES
        if action is PermissionAction.write:
            return page in SEO_CONTENT_PAGES
        return True

    if isinstance(principal, CustomPrincipal):
        granted = principal.permissions.get(page, AccessLevel.none)
        return granted.rank >= ACTION_REQUIREMENTS[action].rank

    assert_never(principal)


def has_permission(role, permissions, page, action) -> bool:
    """
    Decide whether `role` (with an optional custom permission map) may
    perform `action` on admin `page`.

    Unknown roles, pages or actions and missing data all deny. Never raises.
    """
    principal = build_principal(role, permissions)
    if principal is None:
        return False
    return principal_has_permission(principal, page, action)


def can_access_page(role, permissions, page) -> bool:
    """Dashboard is open to every known role; other pages need read."""
    if _as_page(page) is AdminPage.dashboard:
        return build_principal(role, permissions) is not None
    return has_permission(role, permissions, page, PermissionAction.read)


def user_has_permission(user: CurrentUser, page, action) -> bool:
    return has_permission(user.role, user.permissions, page, action)


# -----------------------------------------------------
# Resolved views of a user's access
# -----------------------------------------------------
def get_effective_permissions(role, permissions=None) -> Dict[AdminPage, AccessLevel]:
    """
    Every known page resolved to exactly one access level.
    admin/seo use the built-in maps, custom uses its stored map.
    """
    principal = build_principal(role, permissions)
    if principal is None:
        return {page: AccessLevel.none for page in AdminPage}

    if isinstance(principal, CustomPrincipal):
        return {
            page: principal.permissions.get(page, AccessLevel.none)
            for page in AdminPage
        }

    return dict(ROLE_PERMISSIONS[Role(principal.role)])


def permission_matrix(role, permissions=None) -> Dict[str, Dict[str, bool]]:
    """What the admin UI renders: page → {read, write, delete}."""
    return {
        page.value: {
            action.value: has_permission(role, permissions, page, action)
            for action in PermissionAction
        }
        for page in AdminPage
    }


def validate_permissions(permissions) -> Dict[str, str]:
    """
    Normalise an incoming custom permission map before it is stored.
    Unknown pages and levels are dropped; dashboard/settings are pinned.
    """
    validated = dict(ROLE_PERMISSIONS[Role.custom])

    if isinstance(permissions, dict):
        for key, value in permissions.items():
            page = _as_page(key)
            if page is None:
                continue
            try:
                validated[page] = AccessLevel(getattr(value, "value", value))
            except (ValueError, TypeError):
                continue

    validated.update(PINNED_CUSTOM_PERMISSIONS)
    return {page.value: level.value for page, level in validated.items()}


def get_permission_description(level) -> str:
    try:
        return PERMISSION_LEVELS[AccessLevel(level)]["description"]
    except ValueError:
        return "Unknown permission level"


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(page: AdminPage, action: PermissionAction = PermissionAction.read):
    """
    Usage:
        @router.post("", dependencies=[Depends(requires_permission(AdminPage.blogs, PermissionAction.write))])
    """
    page_name = getattr(page, "value", page)
    action_name = getattr(action, "value", action)

    def dependency(current_user: CurrentUser = Depends(get_current_user)):
        if not user_has_permission(current_user, page, action):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: {action_name} access to '{page_name}' required",
            )
        return current_user

    return dependency

