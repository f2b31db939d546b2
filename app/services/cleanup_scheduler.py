"""
Cleanup Scheduler Service

Removes scratch and staging files left behind by an interrupted process.
Signing calls clean up after themselves; this sweep only catches files whose
owner never got to run its cleanup. Uses APScheduler for the periodic job.
"""

import logging
from datetime import datetime, timedelta
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.config import settings

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

JOB_ID = "cleanup_stale_files"

# Directories to clean up
CLEANUP_DIRECTORIES = [str(settings.SCRATCH_DIR), str(settings.STAGING_DIR)]

FILE_TTL_HOURS = settings.FILE_TTL_HOURS
CLEANUP_INTERVAL_HOURS = settings.CLEANUP_INTERVAL_HOURS


async def cleanup_stale_files() -> dict:
    """
    Delete files older than the TTL from the scratch and staging directories.

    Returns:
        dict: Summary of cleanup operation with counts
    """
    cutoff = datetime.now() - timedelta(hours=FILE_TTL_HOURS)
    cleanup_summary = {
        "directories_scanned": 0,
        "files_deleted": 0,
        "errors": 0,
    }

    for directory in CLEANUP_DIRECTORIES:
        dir_path = Path(directory)

        if not dir_path.exists():
            logger.debug(f"Cleanup directory does not exist: {directory}")
            continue

        cleanup_summary["directories_scanned"] += 1

        try:
            for entry in dir_path.iterdir():
                if not entry.is_file():
                    continue

                try:
                    modified = datetime.fromtimestamp(entry.stat().st_mtime)

                    if modified < cutoff:
                        entry.unlink()
                        cleanup_summary["files_deleted"] += 1
                        logger.info(f"Removed stale file: {entry}")

                except OSError as e:
                    cleanup_summary["errors"] += 1
                    logger.error(f"Failed to remove stale file {entry}: {e}")

        except OSError as e:
            cleanup_summary["errors"] += 1
            logger.error(f"Failed to scan directory {directory}: {e}")

    logger.info(
        f"Cleanup completed: {cleanup_summary['files_deleted']} files deleted, "
        f"{cleanup_summary['errors']} errors"
    )

    return cleanup_summary


def start_cleanup_scheduler():
    """
    Start the cleanup scheduler.

    Safe to call multiple times - will not add duplicate jobs.
    """
    if scheduler.running:
        logger.debug("Scheduler already running")
        return

    if not scheduler.get_job(JOB_ID):
        scheduler.add_job(
            cleanup_stale_files,
            "interval",
            hours=CLEANUP_INTERVAL_HOURS,
            id=JOB_ID,
            name="Remove stale scratch and staging files",
            replace_existing=True,
        )
        logger.info(
            f"Scheduled cleanup job: every {CLEANUP_INTERVAL_HOURS} hour(s), "
            f"TTL: {FILE_TTL_HOURS} hours"
        )

    scheduler.start()
    logger.info("Cleanup scheduler started")


def stop_cleanup_scheduler():
    """Stop the cleanup scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Cleanup scheduler stopped")


def get_scheduler_status() -> dict:
    """
    Get current scheduler status for health checks.

    Returns:
        dict: Scheduler status including running state and job info
    """
    job = scheduler.get_job(JOB_ID)
    return {
        "running": scheduler.running,
        "job_scheduled": job is not None,
        "next_run": str(job.next_run_time) if job else None,
        "interval_hours": CLEANUP_INTERVAL_HOURS,
        "ttl_hours": FILE_TTL_HOURS,
    }
