# services/seo_performance.py

"""
SEO health report across every public page.

Predefined pages are merged with the custom rows in `seo_pages`, each
page is scored, and the aggregate report is cached per site for
PERFORMANCE_CACHE_TTL_SECONDS.
"""

from collections import Counter
from typing import Callable, List, Optional

from core.cache import SimpleCache
from core.config import settings
from core.logging_config import logger
from core.predefined_pages import PREDEFINED_BY_PATH, PREDEFINED_PAGES
from core.supabase_client import get_supabase_client
from core.utils import utc_now


STATUS_PRIORITY = {"critical": 3, "warning": 2, "healthy": 1}


def cache_key_for(site_id: str) -> str:
    return f"performance:{site_id}"


def analyze_page(page: dict) -> dict:
    """Score one page out of 100 and list what is wrong with it."""
    issues = []
    score = 100

    title = page.get("meta_title") or ""
    description = page.get("meta_description") or ""
    og = page.get("open_graph") or {}
    robots = page.get("robots") or "index,follow"

    if not title:
        issues.append("Missing meta title")
        score -= 20
    elif len(title) > 60:
        issues.append("Meta title too long (>60 characters)")
        score -= 10
    elif len(title) < 30:
        issues.append("Meta title too short (<30 characters)")
        score -= 5

    if not description:
        issues.append("Missing meta description")
        score -= 15
    elif len(description) > 160:
        issues.append("Meta description too long (>160 characters)")
        score -= 8
    elif len(description) < 120:
        issues.append("Meta description too short (<120 characters)")
        score -= 3

    if not og.get("title") and not title:
        issues.append("Missing OpenGraph title")
        score -= 5

    if not og.get("description") and not description:
        issues.append("Missing OpenGraph description")
        score -= 5

    if not og.get("image"):
        issues.append("Missing OpenGraph image")
        score -= 5

    indexable = "noindex" not in robots
    if not indexable:
        issues.append("Page set to noindex")
        score -= 10

    score = max(0, score)
    if score < 60:
        status = "critical"
    elif score < 80:
        status = "warning"
    else:
        status = "healthy"

    predefined = PREDEFINED_BY_PATH.get(_merge_key(page.get("path")), {})

    return {
        "path": page.get("path"),
        "title": title or predefined.get("default_title") or "Untitled Page",
        "category": predefined.get("category", "other"),
        "seo_score": score,
        "issues": issues,
        "status": status,
        "metrics": {
            "title_length": len(title),
            "description_length": len(description),
            "has_open_graph": bool(og.get("title") or og.get("description") or og.get("image")),
            "robots_directive": robots,
            "is_indexable": indexable,
        },
    }


def generate_recommendations(analyses: List[dict], top_issues: List[dict]) -> List[str]:
    recommendations = []

    critical = sum(1 for p in analyses if p["status"] == "critical")
    warning = sum(1 for p in analyses if p["status"] == "warning")

    if critical:
        recommendations.append(f"{critical} pages have critical SEO issues that need immediate attention")
    if warning:
        recommendations.append(f"{warning} pages have SEO warnings that should be addressed")

    for item in top_issues:
        if item["count"] > 1:
            recommendations.append(
                f'{item["count"]} pages have "{item["issue"]}" - consider bulk fixing this issue'
            )

    no_index = sum(1 for p in analyses if not p["metrics"]["is_indexable"])
    if no_index:
        recommendations.append(f"{no_index} pages are set to noindex - verify this is intentional")

    return recommendations


def _merge_key(path: Optional[str]) -> Optional[str]:
    # `home` is an alias of the site root
    return "/" if path == "home" else path


def merge_with_predefined(custom_pages: List[dict]) -> List[dict]:
    """Every predefined page (custom row wins) plus custom-only pages."""
    by_path = {_merge_key(p.get("path")): p for p in custom_pages}
    merged = []

    for predefined in PREDEFINED_PAGES:
        merged.append(by_path.pop(predefined["path"], None) or {
            "path": predefined["path"],
            "meta_title": predefined["default_title"],
            "meta_description": predefined["default_description"],
            "robots": "index,follow",
            "slug": predefined["default_slug"],
            "open_graph": {},
            "is_custom": False,
        })

    merged.extend(by_path.values())
    return merged


def build_performance_report(site_id: str, custom_pages: List[dict], *, clock: Callable = utc_now) -> dict:
    analyses = [analyze_page(page) for page in merge_with_predefined(custom_pages)]
    total = len(analyses)

    issue_counts = Counter(issue for a in analyses for issue in a["issues"])
    top_issues = [{"issue": issue, "count": count} for issue, count in issue_counts.most_common(5)]

    category_stats = {}
    for a in analyses:
        stats = category_stats.setdefault(a["category"], {"count": 0, "avg_score": 0.0, "issues": 0})
        stats["count"] += 1
        stats["avg_score"] += a["seo_score"]
        stats["issues"] += len(a["issues"])
    for stats in category_stats.values():
        stats["avg_score"] = stats["avg_score"] / stats["count"]

    ordered = sorted(
        analyses,
        key=lambda a: (-STATUS_PRIORITY[a["status"]], a["seo_score"]),
    )

    return {
        "site_id": site_id,
        "generated_at": clock().isoformat(),
        "overview": {
            "total_pages": total,
            "healthy_pages": sum(1 for a in analyses if a["status"] == "healthy"),
            "warning_pages": sum(1 for a in analyses if a["status"] == "warning"),
            "critical_pages": sum(1 for a in analyses if a["status"] == "critical"),
            "avg_seo_score": (sum(a["seo_score"] for a in analyses) / total) if total else 0,
            "indexable_pages": sum(1 for a in analyses if a["metrics"]["is_indexable"]),
            "custom_pages": len(custom_pages),
        },
        "pages": ordered,
        "top_issues": top_issues,
        "category_stats": category_stats,
        "recommendations": generate_recommendations(analyses, top_issues),
    }


def get_performance_report(site_id: str, cache: SimpleCache) -> dict:
    key = cache_key_for(site_id)
    cached = cache.get(key)
    if cached is not None:
        return cached

    client = get_supabase_client()
    res = client.table("seo_pages").select("*").eq("site_id", site_id).execute()

    report = build_performance_report(site_id, res.data or [])
    cache.set(key, report, ttl_seconds=settings.PERFORMANCE_CACHE_TTL_SECONDS)
    return report


def apply_cache_action(action: str, cache: SimpleCache, site_id: Optional[str] = None) -> Optional[str]:
    """
    clear_cache drops every performance report, refresh_metrics only the
    site's. Returns a message, or None for an unknown action.
    """
    if action == "clear_cache":
        removed = cache.delete_prefix("performance:")
        logger.info(f"Performance cache cleared ({removed} entries)")
        return "Performance cache cleared successfully"

    if action == "refresh_metrics":
        cache.delete(cache_key_for(site_id or settings.DEFAULT_SITE_ID))
        logger.info(f"Performance metrics refreshed for {site_id}")
        return "Performance metrics refreshed successfully"

    return None
