"""
Batch sweeps run by an external scheduler.

    python -m wealthblend.jobs alerts     # dispatch due budget alerts
    python -m wealthblend.jobs rollover   # advance overdue recurring budgets
    python -m wealthblend.jobs reviews    # report estate plans due for review
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from wealthblend.config import settings
from wealthblend.infrastructure.clients.alerts import AlertClient
from wealthblend.infrastructure.database.repositories import BudgetRepository, EstatePlanRepository, commit
from wealthblend.infrastructure.database.session import SessionLocal
from wealthblend.infrastructure.observability.logging import setup_logging
from wealthblend.services.budget import run_alert_sweep, run_recurring_rollover
from wealthblend.services.estate import find_plans_due_for_review
from wealthblend.utils.date_utils import utcnow

JOBS = ("alerts", "rollover", "reviews")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a WealthBlend batch sweep")
    parser.add_argument("job", choices=JOBS)
    args = parser.parse_args(argv)

    setup_logging(settings.log_level)
    now = utcnow()

    db = SessionLocal()
    try:
        if args.job == "alerts":
            # Each stamp is committed as soon as its alert is delivered
            delivered = asyncio.run(
                run_alert_sweep(BudgetRepository(db), AlertClient(), now, checkpoint=lambda: commit(db))
            )
            logging.info("Alert sweep complete", extra={"step": "alerts", "count": len(delivered)})
        elif args.job == "rollover":
            rolled = run_recurring_rollover(BudgetRepository(db), now)
            logging.info("Recurring rollover complete", extra={"step": "rollover", "count": len(rolled)})
        else:
            plans = find_plans_due_for_review(EstatePlanRepository(db), now)
            for plan in plans:
                logging.info(
                    "Estate plan due for review",
                    extra={"record_id": plan.id, "user_id": plan.user_id, "step": "reviews"},
                )
            logging.info("Review sweep complete", extra={"step": "reviews", "count": len(plans)})
        commit(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
