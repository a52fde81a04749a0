"""
Reconciliation of the artisan `is_verified` flag
Re-derives the flag from the verification requests so the two can never
drift apart for long. Approval flips the flag in the same commit; this sweep
covers anything written outside that path.
"""

import logging

from sqlalchemy.orm import Session

from ..database import commit_or_raise
from ..models import User, VerificationRequest

logger = logging.getLogger(__name__)


def reconcile_verified_flags(db: Session) -> dict:
    """
    Set every artisan's ``is_verified`` to whether an approved request exists

    Returns:
        dict: Summary of the flags that changed
    """
    summary = {
        "checked": 0,
        "verified": [],
        "unverified": [],
        "total_changed": 0,
    }

    approved_ids = {
        applicant_id
        for (applicant_id,) in db.query(VerificationRequest.applicant_id)
        .filter(VerificationRequest.status == "approved")
        .distinct()
    }

    artisans = db.query(User).filter(User.role == "artisan").all()
    for artisan in artisans:
        summary["checked"] += 1
        should_be_verified = artisan.id in approved_ids
        if bool(artisan.is_verified) == should_be_verified:
            continue

        artisan.is_verified = should_be_verified
        if should_be_verified:
            summary["verified"].append(artisan.id)
            logger.info(f"✅ User {artisan.id} marked verified (approved request on file)")
        else:
            summary["unverified"].append(artisan.id)
            logger.warning(f"⚠️ User {artisan.id} marked unverified (no approved request)")

    summary["total_changed"] = len(summary["verified"]) + len(summary["unverified"])

    if summary["total_changed"]:
        commit_or_raise(db, "reconcile verified flags")

    logger.info(
        f"🔄 Verified flag sweep: {summary['checked']} artisans checked, "
        f"{summary['total_changed']} changed"
    )
    return summary
