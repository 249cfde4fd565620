# tests/test_permissions.py

"""
Tests for the page permission evaluator and the permission-gated routes.
"""

import pytest
from fastapi.testclient import TestClient

from core.permission_helpers import (
    can_access_page,
    get_effective_permissions,
    has_permission,
    permission_matrix,
    validate_permissions,
)
from core.permissions import ROLE_PERMISSIONS
from models.enums import AccessLevel, AdminPage, PermissionAction, Role


ALL_PAGES = AdminPage.list()
ALL_ACTIONS = PermissionAction.list()


# -----------------------------------------------------
# admin
# -----------------------------------------------------
@pytest.mark.parametrize("page", ALL_PAGES)
@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_admin_allowed_everywhere(page, action):
    assert has_permission("admin", None, page, action) is True
    assert has_permission("admin", {"blogs": "none"}, page, action) is True


# -----------------------------------------------------
# unknown inputs deny
# -----------------------------------------------------
@pytest.mark.parametrize("role", ["admin", "seo", "custom"])
@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_unknown_page_denied(role, action):
    assert has_permission(role, {"reports": "full"}, "reports", action) is False
    assert has_permission(role, None, "", action) is False


def test_unknown_role_and_action_denied():
    assert has_permission("superuser", None, "blogs", "read") is False
    assert has_permission(None, None, "blogs", "read") is False
    assert has_permission("admin", None, "blogs", "publish") is False


# -----------------------------------------------------
# custom role
# -----------------------------------------------------
@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_custom_full_allows_every_action(action):
    assert has_permission("custom", {"staff": "full"}, "staff", action) is True


@pytest.mark.parametrize("permissions", [{"staff": "none"}, {}, None, {"blogs": "full"}])
@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_custom_none_or_unset_denies_every_action(permissions, action):
    assert has_permission("custom", permissions, "staff", action) is False


def test_custom_write_does_not_imply_delete():
    permissions = {"blogs": "write"}
    assert has_permission("custom", permissions, "blogs", "read") is True
    assert has_permission("custom", permissions, "blogs", "write") is True
    assert has_permission("custom", permissions, "blogs", "delete") is False


def test_custom_read_only():
    permissions = {"messages": "read"}
    assert has_permission("custom", permissions, "messages", "read") is True
    assert has_permission("custom", permissions, "messages", "write") is False


def test_custom_malformed_level_treated_as_none():
    assert has_permission("custom", {"blogs": "everything"}, "blogs", "read") is False
    assert has_permission("custom", {"blogs": 3}, "blogs", "read") is False


def test_custom_accepts_enum_arguments():
    permissions = {AdminPage.seo: AccessLevel.write}
    assert has_permission(Role.custom, permissions, AdminPage.seo, PermissionAction.write) is True


# -----------------------------------------------------
# seo role
# -----------------------------------------------------
def test_seo_cannot_manage_admin_users():
    assert has_permission("seo", None, "users", "write") is False
    assert has_permission("seo", None, "users", "read") is False


def test_seo_content_pages():
    for page in ("blogs", "seo"):
        for action in ALL_ACTIONS:
            assert has_permission("seo", None, page, action) is True


def test_seo_other_pages_read_only():
    for page in ("dashboard", "staff", "messages", "activity", "services", "settings"):
        assert has_permission("seo", None, page, "read") is True
        assert has_permission("seo", None, page, "write") is False
        assert has_permission("seo", None, page, "delete") is False


def test_seo_ignores_stored_permission_map():
    assert has_permission("seo", {"users": "full"}, "users", "read") is False


def test_seo_role_map_matches_evaluator():
    for page, level in ROLE_PERMISSIONS[Role.seo].items():
        for action in PermissionAction:
            expected = level.rank >= {"read": 1, "write": 2, "delete": 3}[action.value]
            assert has_permission("seo", None, page, action) is expected, (page, action)


# -----------------------------------------------------
# page visibility / resolved views
# -----------------------------------------------------
def test_dashboard_visible_to_every_known_role():
    assert can_access_page("custom", {"dashboard": "none"}, "dashboard") is True
    assert can_access_page("seo", None, "dashboard") is True
    assert can_access_page("ghost", None, "dashboard") is False


def test_effective_permissions_cover_every_page():
    effective = get_effective_permissions("custom", {"blogs": "write", "bogus": "full"})
    assert set(effective) == set(AdminPage)
    assert effective[AdminPage.blogs] is AccessLevel.write
    assert effective[AdminPage.users] is AccessLevel.none


def test_effective_permissions_unknown_role_is_all_none():
    assert set(get_effective_permissions("ghost").values()) == {AccessLevel.none}


def test_permission_matrix_agrees_with_has_permission():
    matrix = permission_matrix("custom", {"blogs": "write"})
    assert matrix["blogs"] == {"read": True, "write": True, "delete": False}
    assert matrix["users"] == {"read": False, "write": False, "delete": False}


# -----------------------------------------------------
# validate_permissions
# -----------------------------------------------------
def test_validate_permissions_pins_dashboard_and_settings():
    validated = validate_permissions({"settings": "none", "dashboard": "full", "blogs": "write"})
    assert validated["settings"] == "full"
    assert validated["dashboard"] == "read"
    assert validated["blogs"] == "write"


def test_validate_permissions_drops_unknown_pages_and_levels():
    validated = validate_permissions({"reports": "full", "staff": "admin"})
    assert "reports" not in validated
    assert validated["staff"] == "none"
    assert set(validated) == set(ALL_PAGES)


def test_validate_permissions_non_dict_input():
    assert validate_permissions(None) == validate_permissions({})


# -----------------------------------------------------
# route gating
# -----------------------------------------------------
def test_custom_without_seo_gets_403_on_meta_management(client: TestClient, login_as, custom_user):
    login_as(custom_user)
    response = client.get("/admin/meta-management/audit-logs")
    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert "seo" in body["error"]


def test_custom_read_only_blogs_cannot_create(client: TestClient, login_as, custom_user):
    login_as(custom_user)
    response = client.post("/admin/blogs", json={"title": "Hello"})
    assert response.status_code == 403


def test_seo_user_cannot_list_admin_users(client: TestClient, login_as, seo_user):
    login_as(seo_user)
    response = client.get("/admin/users")
    assert response.status_code == 403
