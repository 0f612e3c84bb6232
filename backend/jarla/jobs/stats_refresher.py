from __future__ import annotations

from datetime import datetime

import click
from apscheduler.schedulers.background import BackgroundScheduler
from flask import current_app
from flask.cli import AppGroup

from jarla.extensions import db
from jarla.models import ContentSubmission, DealApplication
from jarla.utils.earnings import sync_submission_earning
from jarla.utils.tiktok import fetch_video_stats

LIVE_STATUSES = ("pending_review", "approved")


def _counted(stats: dict) -> bool:
    return stats["views"] > 0 or stats["likes"] > 0


def refresh_submissions(subs) -> dict:
    """Pull TikTok counters for each submission and store the positive ones.

    Earnings of approved submissions follow the new view count. Commits once.
    """
    results = {}
    now = datetime.utcnow()
    for sub in subs:
        stats = fetch_video_stats(sub.tiktok_video_url, sub.tiktok_video_id)
        results[str(sub.id)] = stats
        if stats["views"] > 0:
            sub.current_views = int(stats["views"])
        if stats["likes"] > 0:
            sub.current_likes = int(stats["likes"])
        if _counted(stats):
            sub.stats_refreshed_at = now
            sync_submission_earning(sub)
    db.session.commit()
    return results


def refresh_applications(apps) -> dict:
    """Same as refresh_submissions for deal videos; earnings are derived on read."""
    results = {}
    now = datetime.utcnow()
    for a in apps:
        if not a.tiktok_video_url:
            continue
        stats = fetch_video_stats(a.tiktok_video_url, a.tiktok_video_id)
        results[str(a.id)] = stats
        if stats["views"] > 0:
            a.current_views = int(stats["views"])
            a.stats_refreshed_at = now
    db.session.commit()
    return results


def refresh_submission_stats(*, limit: int = 200) -> dict:
    """Refresh the least recently refreshed live submissions and deal videos."""
    subs = (ContentSubmission.query
            .filter(ContentSubmission.status.in_(LIVE_STATUSES))
            .order_by(ContentSubmission.stats_refreshed_at.asc().nullsfirst(), ContentSubmission.id.asc())
            .limit(int(limit))
            .all())
    apps = (DealApplication.query
            .filter(DealApplication.status == "accepted", DealApplication.tiktok_video_url.isnot(None))
            .order_by(DealApplication.stats_refreshed_at.asc().nullsfirst(), DealApplication.id.asc())
            .limit(int(limit))
            .all())
    try:
        results = list(refresh_submissions(subs).values())
        results += list(refresh_applications(apps).values())
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("stats refresh failed: %s", e)
        return {"ok": False, "error": str(e), "checked": 0, "updated": 0}

    updated = sum(1 for s in results if _counted(s))
    current_app.logger.info("stats refresh: checked=%s updated=%s", len(results), updated)
    return {"ok": True, "checked": len(results), "updated": updated}


jarla_cli = AppGroup("jarla", help="Jarla maintenance commands.")


@jarla_cli.command("refresh-stats")
@click.option("--limit", default=200, show_default=True, help="Max submissions and deal videos to refresh.")
def refresh_stats_command(limit: int):
    out = refresh_submission_stats(limit=limit)
    click.echo(f"checked={out['checked']} updated={out['updated']}")


def register_cli(app) -> None:
    app.cli.add_command(jarla_cli)


def start_scheduler(app) -> BackgroundScheduler | None:
    minutes = int(app.config.get("STATS_REFRESH_MINUTES") or 0)
    if minutes <= 0:
        return None
    batch = int(app.config.get("STATS_REFRESH_BATCH") or 200)

    def _run():
        with app.app_context():
            refresh_submission_stats(limit=batch)

    scheduler = BackgroundScheduler()
    scheduler.add_job(_run, "interval", minutes=minutes, id="refresh_submission_stats", max_instances=1, coalesce=True)
    scheduler.start()
    app.logger.info("stats refresh scheduled every %s min", minutes)
    return scheduler
