from __future__ import annotations

import re
from typing import Optional

import requests
from flask import current_app

OEMBED_URL = "https://www.tiktok.com/oembed"
BROWSER_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

_VIDEO_ID_RE = re.compile(r"/video/(\d+)")
_PLAY_COUNT_RE = re.compile(r"\"playCount\"\s*:\s*(\d+)")
_DIGG_COUNT_RE = re.compile(r"\"diggCount\"\s*:\s*(\d+)")


def parse_video_id(url: str) -> Optional[str]:
    m = _VIDEO_ID_RE.search(url or "")
    return m.group(1) if m else None


def is_tiktok_url(url: str) -> bool:
    u = (url or "").strip().lower()
    return u.startswith("https://") and "tiktok.com/" in u


def _timeout() -> float:
    return float(current_app.config.get("HTTP_TIMEOUT_SECONDS") or 20.0)


def _oembed_stats(url: str) -> dict:
    r = requests.get(OEMBED_URL, params={"url": url}, timeout=_timeout())
    if not r.ok:
        return {"views": 0, "likes": 0}
    data = r.json()
    if not isinstance(data, dict):
        return {"views": 0, "likes": 0}
    stats = data.get("statistics")
    if not isinstance(stats, dict):
        stats = {}
    return {
        "views": int(data.get("view_count") or stats.get("playCount") or 0),
        "likes": int(data.get("like_count") or stats.get("diggCount") or 0),
    }


def _page_stats(url: str) -> dict:
    r = requests.get(url, headers={"User-Agent": BROWSER_UA}, timeout=_timeout())
    html = r.text or ""
    views = _PLAY_COUNT_RE.search(html)
    likes = _DIGG_COUNT_RE.search(html)
    return {
        "views": int(views.group(1)) if views else 0,
        "likes": int(likes.group(1)) if likes else 0,
    }


def fetch_video_stats(url: str, video_id: Optional[str] = None) -> dict:
    """View/like counters for a TikTok video.

    oEmbed first; when it reports no views and the video id is known the
    public page is scraped for its embedded counters.
    """
    stats = {"views": 0, "likes": 0}
    try:
        stats = _oembed_stats(url)
    except (requests.RequestException, ValueError, TypeError) as e:
        current_app.logger.warning("oEmbed stats failed for %s: %s", url, e)

    if stats["views"] == 0 and video_id:
        try:
            scraped = _page_stats(url)
            if scraped["views"] > 0 or scraped["likes"] > 0:
                stats = scraped
        except requests.RequestException as e:
            current_app.logger.warning("page scrape failed for %s: %s", url, e)
    return stats
