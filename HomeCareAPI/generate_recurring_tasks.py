"""
Scheduled job: materialize planned tasks for every due recurring task.

Run daily, e.g. from Heroku Scheduler or cron:

    python -m HomeCareAPI.generate_recurring_tasks

Safe to run more than once a day; a second run creates nothing.
"""

import logging
import sys

from HomeCareAPI.database import SessionLocal
from HomeCareAPI.recurring_service import RecurringTaskScheduler

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> int:
    logger.info("Starting recurring task generation job.")
    db = SessionLocal()
    try:
        result = RecurringTaskScheduler(db).generate_all_due()
    except Exception:
        logger.exception("Recurring task generation job failed.")
        return 1
    finally:
        db.close()

    logger.info(
        "Recurring task generation job finished: %d generated, %d failed.",
        len(result.tasks),
        len(result.failed),
    )
    if result.failed:
        logger.warning("Recurring tasks that failed to generate: %s", result.failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
