# services/sitemap.py

"""
Sitemap for the public site, built from the predefined pages merged with
the custom SEO rows of one site.
"""

import math
from collections import Counter
from typing import Callable, List
from xml.sax.saxutils import escape

from core.config import settings
from core.predefined_pages import PREDEFINED_BY_PATH
from core.supabase_client import get_supabase_client
from core.utils import utc_now
from services.seo_performance import merge_with_predefined


# Search engines stop reading a single sitemap file past this many URLs
MAX_URLS_PER_SITEMAP = 50000

_XML_ENTITIES = {"'": "&apos;", '"': "&quot;"}

CHANGE_FREQUENCY = {
    "main": "weekly",
    "services": "monthly",
    "blog": "weekly",
    "about": "monthly",
    "contact": "yearly",
}

CATEGORY_PRIORITY = {
    "main": 0.9,
    "services": 0.8,
    "blog": 0.7,
    "about": 0.6,
    "contact": 0.6,
}


def _is_root(path: str) -> bool:
    return path in ("/", "/home", "home")


def build_url(base_url: str, path: str, slug: str = None) -> str:
    """
    The root maps to the base URL. A slug that differs from the one
    derived from the path replaces the path.
    """
    base_url = base_url.rstrip("/")
    if _is_root(path):
        return base_url

    derived = path.lstrip("/").replace("/", "-")
    if slug and slug != derived:
        return f"{base_url}/{slug}"
    return f"{base_url}{path}"


def page_priority(path: str, category: str) -> float:
    if _is_root(path):
        return 1.0
    return CATEGORY_PRIORITY.get(category, 0.5)


def _category(page: dict) -> str:
    path = "/" if page.get("path") == "home" else page.get("path")
    predefined = PREDEFINED_BY_PATH.get(path)
    if predefined:
        return predefined["category"]
    return page.get("page_category") or "other"


def build_sitemap_entries(custom_pages: List[dict], base_url: str, *, clock: Callable = utc_now) -> List[dict]:
    today = clock().date().isoformat()
    entries = []

    for page in merge_with_predefined(custom_pages):
        path = page.get("path")
        if not path:
            continue
        category = _category(page)
        updated_at = page.get("updated_at")
        entries.append({
            "url": build_url(base_url, path, page.get("slug")),
            "path": path,
            "last_modified": str(updated_at)[:10] if updated_at else today,
            "change_frequency": CHANGE_FREQUENCY.get(category, "monthly"),
            "priority": page_priority(path, category),
            "category": category,
        })

    entries.sort(key=lambda e: (-e["priority"], e["url"]))
    return entries


def sitemap_stats(entries: List[dict]) -> dict:
    total = len(entries)
    chunks = max(1, math.ceil(total / MAX_URLS_PER_SITEMAP))
    return {
        "total_urls": total,
        "last_modified": max((e["last_modified"] for e in entries), default=None),
        "category_breakdown": dict(Counter(e["category"] for e in entries)),
        "priority_breakdown": {str(p): c for p, c in Counter(e["priority"] for e in entries).items()},
        "average_priority": (sum(e["priority"] for e in entries) / total) if total else 0,
        "needs_sitemap_index": total > MAX_URLS_PER_SITEMAP,
        "sitemap_count": chunks,
    }


def render_xml(entries: List[dict]) -> str:
    urls = "".join(
        "\n  <url>"
        f"\n    <loc>{escape(e['url'], _XML_ENTITIES)}</loc>"
        f"\n    <lastmod>{e['last_modified']}</lastmod>"
        f"\n    <changefreq>{e['change_frequency']}</changefreq>"
        f"\n    <priority>{e['priority']:.1f}</priority>"
        "\n  </url>"
        for e in entries
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        f"{urls}\n</urlset>\n"
    )


def get_sitemap(site_id: str, base_url: str = None) -> List[dict]:
    client = get_supabase_client()
    res = (
        client.table("seo_pages")
        .select("path,slug,page_category,updated_at")
        .eq("site_id", site_id)
        .execute()
    )
    return build_sitemap_entries(res.data or [], base_url or settings.SITE_BASE_URL)
