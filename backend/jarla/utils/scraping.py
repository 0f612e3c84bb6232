from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin

import requests
from flask import current_app

_OG_IMAGE_RES = (
    re.compile(r"<meta[^>]*property=[\"']og:image[\"'][^>]*content=[\"']([^\"']+)[\"']", re.I),
    re.compile(r"<meta[^>]*content=[\"']([^\"']+)[\"'][^>]*property=[\"']og:image[\"']", re.I),
)
_APPLE_ICON_RE = re.compile(r"<link[^>]*rel=[\"']apple-touch-icon[\"'][^>]*href=[\"']([^\"']+)[\"']", re.I)
_FAVICON_RE = re.compile(r"<link[^>]*rel=[\"'](?:shortcut )?icon[\"'][^>]*href=[\"']([^\"']+)[\"']", re.I)
_LOGO_IMG_RES = (
    re.compile(r"<img[^>]*(?:class|id)=[\"'][^\"']*logo[^\"']*[\"'][^>]*src=[\"']([^\"']+)[\"']", re.I),
    re.compile(r"<img[^>]*src=[\"']([^\"']+logo[^\"']+)[\"']", re.I),
)


def format_url(url: str) -> str:
    formatted = (url or "").strip()
    if not formatted.startswith("http://") and not formatted.startswith("https://"):
        formatted = f"https://{formatted}"
    return formatted


def _absolute(base_url: str, href: str) -> str:
    if href.startswith("/"):
        return urljoin(format_url(base_url), href)
    return href


def is_configured() -> bool:
    return bool((current_app.config.get("FIRECRAWL_API_KEY") or "").strip())


def _scrape(url: str, formats: list, only_main_content: bool = False) -> dict:
    cfg = current_app.config
    key = (cfg.get("FIRECRAWL_API_KEY") or "").strip()
    if not key:
        return {"ok": False, "error": "FIRECRAWL_API_KEY not set"}
    headers = {"Authorization": f"Bearer {key}", "Content-Type": "application/json"}
    payload = {"url": format_url(url), "formats": formats}
    if only_main_content:
        payload["onlyMainContent"] = True
    try:
        r = requests.post(cfg.get("FIRECRAWL_API_URL"), headers=headers, json=payload,
                          timeout=float(cfg.get("HTTP_TIMEOUT_SECONDS") or 20.0))
        j = r.json() if r.content else {}
    except (requests.RequestException, ValueError) as e:
        return {"ok": False, "error": str(e)}
    if 200 <= r.status_code < 300 and j.get("success"):
        return {"ok": True, "data": j.get("data") or {}}
    return {"ok": False, "error": j.get("error") or f"HTTP {r.status_code}"}


def scrape_markdown(url: str) -> str:
    """Main-content markdown of a page, or "" when the scrape fails."""
    current_app.logger.info("scraping %s", url)
    res = _scrape(url, ["markdown"], only_main_content=True)
    if not res["ok"]:
        current_app.logger.warning("scrape failed for %s: %s", url, res["error"])
        return ""
    return res["data"].get("markdown") or ""


def logo_from_html(base_url: str, html: str) -> Optional[str]:
    for pattern in _OG_IMAGE_RES:
        m = pattern.search(html)
        if m:
            return m.group(1)

    m = _APPLE_ICON_RE.search(html)
    if m:
        return _absolute(base_url, m.group(1))

    m = _FAVICON_RE.search(html)
    if m:
        icon = _absolute(base_url, m.group(1))
        # generic .ico files make poor logos
        if not icon.endswith(".ico"):
            return icon

    for pattern in _LOGO_IMG_RES:
        m = pattern.search(html)
        if m:
            return _absolute(base_url, m.group(1))
    return None


def find_logo(url: str) -> Optional[str]:
    res = _scrape(url, ["branding", "html"])
    if not res["ok"]:
        current_app.logger.warning("logo scrape failed for %s: %s", url, res["error"])
        return None
    data = res["data"]
    branding = data.get("branding") or {}
    logo = branding.get("logo") or (branding.get("images") or {}).get("logo")
    if logo:
        return logo
    return logo_from_html(url, data.get("html") or "")
