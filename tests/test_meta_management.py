# tests/test_meta_management.py

"""
Tests for SEO meta management routes: upsert, reset, bulk, audit logs and sitemap.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import MagicMock, patch

from core.config import settings
from core.predefined_pages import PREDEFINED_PAGES


EXISTING_PAGE = {
    "id": 7,
    "site_id": "altiorainfotech",
    "path": "/about",
    "slug": "about",
    "meta_title": "About",
    "meta_description": "Old description",
    "robots": "index,follow",
    "open_graph": None,
}


@pytest.fixture
def seo_db(mock_supabase_client):
    """Patch the SEO page service and the audit recorder onto one mock client."""
    with patch("services.seo_pages.get_supabase_client", return_value=mock_supabase_client), \
            patch("services.audit_logger.get_supabase_client", return_value=mock_supabase_client):
        yield mock_supabase_client


# -----------------------------------------------------
# UPSERT
# -----------------------------------------------------
def test_create_page_records_create_audit(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[]),                                   # find_page
        MagicMock(data=[{**EXISTING_PAGE, "id": 9}]),         # upsert
        MagicMock(data=[{"id": 100}]),                        # audit insert
    ]

    response = client.post("/admin/meta-management", json={
        "path": "contact",
        "slug": "Contact Us!",
        "meta_title": "  Contact  ",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["action"] == "create"

    row = seo_db.query.upsert.call_args.args[0]
    assert row["path"] == "/contact"
    assert row["slug"] == "contact-us"
    assert row["meta_title"] == "Contact"
    assert row["created_by"] == "seo-1"
    assert seo_db.query.upsert.call_args.kwargs == {"on_conflict": "site_id,path"}

    audit = seo_db.query.insert.call_args.args[0]
    assert audit["action"] == "create"
    assert {c["field"] for c in audit["changes"]} == {"meta_title", "slug", "robots"}


def test_update_page_with_slug_change_creates_redirect(client: TestClient, login_as, admin_user, seo_db):
    login_as(admin_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[EXISTING_PAGE]),                      # find_page
        MagicMock(data=[EXISTING_PAGE]),                      # upsert
        MagicMock(data=[{"id": 1}]),                          # update audit
        MagicMock(data=[{"id": 55}]),                         # redirect insert
        MagicMock(data=[{"id": 2}]),                          # redirect_create audit
        MagicMock(data=[{"id": 3}]),                          # slug_change audit
    ]

    response = client.post("/admin/meta-management", json={
        "path": "/about",
        "slug": "about-us",
        "meta_title": "About",
        "meta_description": "Old description",
    })

    assert response.status_code == 200
    assert response.json()["action"] == "update"

    inserts = [c.args[0] for c in seo_db.query.insert.call_args_list]
    assert [row.get("action") for row in inserts] == [
        "update", None, "redirect_create", "slug_change",
    ]
    assert inserts[0]["changes"] == [{"field": "slug", "old_value": "about", "new_value": "about-us"}]
    assert inserts[1]["from_path"] == "/about"
    assert inserts[1]["to_path"] == "/about-us"
    assert inserts[1]["status_code"] == 301
    assert inserts[3]["metadata"]["redirect_created"] is True


def test_unchanged_update_writes_no_audit(client: TestClient, login_as, admin_user, seo_db):
    login_as(admin_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[EXISTING_PAGE]),
        MagicMock(data=[EXISTING_PAGE]),
    ]

    response = client.post("/admin/meta-management", json={
        "path": "/about",
        "slug": "about",
        "meta_title": "About",
        "meta_description": "Old description",
    })

    assert response.status_code == 200
    seo_db.query.insert.assert_not_called()


def test_upsert_succeeds_when_audit_persistence_fails(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[]),
        MagicMock(data=[{**EXISTING_PAGE, "path": "/new"}]),
        Exception("audit table unavailable"),
    ]

    response = client.post("/admin/meta-management", json={"path": "/new", "meta_title": "New page"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["data"]["path"] == "/new"


def test_upsert_database_failure_is_500(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[]),
        Exception("connection refused"),
    ]

    response = client.post("/admin/meta-management", json={"path": "/new"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to save SEO page"}


def test_upsert_meta_title_too_long_is_400(client: TestClient, login_as, seo_user):
    login_as(seo_user)
    response = client.post("/admin/meta-management", json={"path": "/x", "meta_title": "t" * 71})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "meta_title"


def test_upsert_clears_site_performance_cache(client: TestClient, login_as, seo_user, seo_db, cache):
    login_as(seo_user)
    cache.set("performance:altiorainfotech", {"stale": True})
    seo_db.query.execute.side_effect = [
        MagicMock(data=[]),
        MagicMock(data=[{**EXISTING_PAGE, "path": "/new"}]),
        MagicMock(data=[]),
    ]

    client.post("/admin/meta-management", json={"path": "/new", "meta_title": "New"})

    assert cache.get("performance:altiorainfotech") is None


# -----------------------------------------------------
# GET / RESET
# -----------------------------------------------------
def test_get_page_by_nested_path(client: TestClient, login_as, custom_user, seo_db):
    custom_user.permissions = {"seo": "read"}
    login_as(custom_user)
    seo_db.query.execute.return_value = MagicMock(data=[EXISTING_PAGE])

    response = client.get("/admin/meta-management/pages/services/ai-ml")

    assert response.status_code == 200
    seo_db.query.eq.assert_any_call("path", "/services/ai-ml")


def test_get_missing_page_is_404(client: TestClient, login_as, admin_user, seo_db):
    login_as(admin_user)
    response = client.get("/admin/meta-management/pages/nowhere")
    assert response.status_code == 404


def test_reset_page_records_reset(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[EXISTING_PAGE]),
        MagicMock(data=[{"id": 1}]),
    ]

    response = client.delete("/admin/meta-management/pages/about")

    assert response.status_code == 200
    audit = seo_db.query.insert.call_args.args[0]
    assert audit["action"] == "reset"
    assert audit["path"] == "/about"


def test_reset_missing_page_is_404(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    response = client.delete("/admin/meta-management/pages/about")
    assert response.status_code == 404
    seo_db.query.insert.assert_not_called()


def test_custom_write_cannot_reset(client: TestClient, login_as, custom_user):
    custom_user.permissions = {"seo": "write"}
    login_as(custom_user)
    response = client.delete("/admin/meta-management/pages/about")
    assert response.status_code == 403


# -----------------------------------------------------
# BULK
# -----------------------------------------------------
def test_bulk_delete_records_one_entry(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    seo_db.query.execute.side_effect = [
        MagicMock(data=[{"path": "/a"}, {"path": "/b"}]),
        MagicMock(data=[{"id": 1}]),
    ]

    response = client.post("/admin/meta-management/bulk", json={
        "operation": "bulkDelete",
        "paths": ["a", "/b"],
    })

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["operation"] == "bulk_delete"
    assert data["affected_paths"] == ["/a", "/b"]
    assert data["result"] == {"deleted": 2}

    seo_db.query.in_.assert_called_once_with("path", ["/a", "/b"])
    assert seo_db.query.insert.call_count == 1
    audit = seo_db.query.insert.call_args.args[0]
    assert audit["metadata"]["bulk_operation"] is True


def test_bulk_reset_only_touches_custom_rows(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    response = client.post("/admin/meta-management/bulk", json={"operation": "bulk_reset", "paths": ["/a"]})

    assert response.status_code == 200
    seo_db.query.eq.assert_any_call("is_custom", True)


def test_bulk_unknown_operation_is_400(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    response = client.post("/admin/meta-management/bulk", json={"operation": "bulkExplode"})
    assert response.status_code == 400
    seo_db.query.insert.assert_not_called()


def test_bulk_delete_needs_delete_access(client: TestClient, login_as, custom_user):
    custom_user.permissions = {"seo": "write"}
    login_as(custom_user)
    response = client.post("/admin/meta-management/bulk", json={"operation": "bulk_delete", "paths": ["/a"]})
    assert response.status_code == 403


# -----------------------------------------------------
# AUDIT LOG ROUTES
# -----------------------------------------------------
def test_audit_logs_route(client: TestClient, login_as, seo_user, mock_supabase_client):
    login_as(seo_user)
    mock_supabase_client.query.execute.return_value = MagicMock(data=[{"id": 1}], count=1)

    with patch("services.audit_logger.get_supabase_client", return_value=mock_supabase_client):
        response = client.get("/admin/meta-management/audit-logs?limit=500&action=update")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"]["limit"] == 100
    mock_supabase_client.query.eq.assert_any_call("action", "update")


def test_audit_logs_invalid_action_is_400(client: TestClient, login_as, seo_user):
    login_as(seo_user)
    response = client.get("/admin/meta-management/audit-logs?action=explode")
    assert response.status_code == 400


# -----------------------------------------------------
# BULK LIMITS
# -----------------------------------------------------
def test_bulk_delete_over_seo_limit_is_400(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)
    paths = [f"/page-{i}" for i in range(11)]

    response = client.post("/admin/meta-management/bulk", json={"operation": "bulk_delete", "paths": paths})

    assert response.status_code == 400
    assert response.json()["error"] == "Bulk delete limited to 10 items for seo role"
    seo_db.query.delete.assert_not_called()
    seo_db.query.insert.assert_not_called()


def test_bulk_update_limit_depends_on_role(client: TestClient, login_as, admin_user, custom_user, seo_db):
    pages = [{"path": f"/page-{i}", "meta_title": "Title"} for i in range(11)]

    custom_user.permissions = {"seo": "full"}
    login_as(custom_user)
    refused = client.post("/admin/meta-management/bulk", json={"operation": "bulk_update", "pages": pages})

    login_as(admin_user)
    accepted = client.post("/admin/meta-management/bulk", json={"operation": "bulk_update", "pages": pages})

    assert refused.status_code == 400
    assert refused.json()["error"] == "Bulk update limited to 10 items for custom role"
    assert accepted.status_code == 200
    assert seo_db.query.upsert.call_count == 1


def test_bulk_update_keeps_last_entry_per_path(client: TestClient, login_as, seo_user, seo_db):
    login_as(seo_user)

    response = client.post("/admin/meta-management/bulk", json={
        "operation": "bulk_update",
        "pages": [
            {"path": "/a", "meta_title": "First"},
            {"path": "/b", "meta_title": "Other"},
            {"path": "a", "meta_title": "Second"},
        ],
    })

    assert response.status_code == 200
    rows = seo_db.query.upsert.call_args.args[0]
    assert [(row["path"], row["meta_title"]) for row in rows] == [("/a", "Second"), ("/b", "Other")]
    assert response.json()["data"]["affected_paths"] == ["/a", "/b"]


# -----------------------------------------------------
# SITEMAP
# -----------------------------------------------------
@pytest.fixture
def sitemap_db(mock_supabase_client):
    with patch("services.sitemap.get_supabase_client", return_value=mock_supabase_client):
        yield mock_supabase_client


def test_sitemap_merges_predefined_and_custom_pages(client: TestClient, login_as, seo_user, sitemap_db):
    login_as(seo_user)
    sitemap_db.query.execute.return_value = MagicMock(data=[
        {"path": "/about", "slug": "about-company", "updated_at": "2024-05-01T10:00:00+00:00"},
        {"path": "/landing", "slug": "landing", "page_category": "other"},
    ])

    response = client.get("/admin/meta-management/sitemap")

    assert response.status_code == 200
    data = response.json()["data"]
    entries = {e["path"]: e for e in data["entries"]}
    base = settings.SITE_BASE_URL.rstrip("/")

    assert data["entries"][0]["url"] == base
    assert data["entries"][0]["priority"] == 1.0
    assert entries["/about"]["url"] == f"{base}/about-company"
    assert entries["/about"]["last_modified"] == "2024-05-01"
    assert entries["/landing"]["url"] == f"{base}/landing"
    assert data["stats"]["total_urls"] == len(PREDEFINED_PAGES) + 1
    sitemap_db.query.eq.assert_called_once_with("site_id", "altiorainfotech")


def test_sitemap_as_xml(client: TestClient, login_as, seo_user, sitemap_db):
    login_as(seo_user)

    response = client.get("/admin/meta-management/sitemap?format=xml")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert response.text.count("<url>") == len(PREDEFINED_PAGES)
    assert "<priority>1.0</priority>" in response.text


def test_sitemap_requires_seo_read(client: TestClient, login_as, custom_user):
    login_as(custom_user)
    assert client.get("/admin/meta-management/sitemap").status_code == 403
