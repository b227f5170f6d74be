# ekart/services/cleanup.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from firebase_admin import exceptions as firebase_exceptions

from ekart.config import get_db, settings
from ekart.repositories import users as users_repo
from ekart.services.account import purge_user
from ekart.utils.timestamps import utcnow

logger = logging.getLogger("ekart.cleanup")


def purge_stale_registrations(db, now: Optional[datetime] = None) -> int:
    """
    Deletes accounts that are still unverified `unverified_account_ttl_hours` after
    registration. Returns the number of accounts removed.
    """
    cutoff = (now or utcnow()) - timedelta(hours=settings.unverified_account_ttl_hours)
    purged = 0
    for user in users_repo.list_unverified(db):
        created = user.get("created_at")
        if not isinstance(created, datetime) or created > cutoff:
            continue
        try:
            purge_user(db, user["id"])
        except firebase_exceptions.FirebaseError:
            # retried on the next run
            logger.exception("Could not purge unverified account %s", user["id"])
            continue
        purged += 1
    if purged:
        logger.info("Purged %d unverified registration(s) older than %s", purged, cutoff.isoformat())
    return purged


def run_cleanup_job() -> int:
    """Scheduler entry point."""
    return purge_stale_registrations(get_db())
