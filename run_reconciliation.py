"""
Verified flag reconciliation runner
Run this as a scheduled job (e.g., daily cron): python run_reconciliation.py
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from talentnest.database import SessionLocal
from talentnest.services.verified_flag_sync import reconcile_verified_flags

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("🚀 Starting verified flag reconciliation...")
    db = SessionLocal()
    try:
        summary = reconcile_verified_flags(db)
        logger.info(f"✅ Reconciliation finished: {summary}")
    except Exception as e:
        logger.error(f"❌ Reconciliation failed: {e}")
        sys.exit(1)
    finally:
        db.close()
