"""Run the expiry notification jobs once; meant to be scheduled by cron."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from inventory_alerts.application.use_cases.notifications import evaluate_rules, process_queue
from inventory_alerts.config import get_settings
from inventory_alerts.infrastructure.database import SessionLocal, initialize_database

logger = logging.getLogger(__name__)

JOB_EVALUATE = "evaluate"
JOB_PROCESS_QUEUE = "process-queue"
JOB_ALL = "all"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the notification jobs."""

    parser = argparse.ArgumentParser(
        description="Evaluate expiry rules and/or deliver queued notifications.",
    )
    parser.add_argument(
        "job",
        choices=(JOB_EVALUATE, JOB_PROCESS_QUEUE, JOB_ALL),
        help="Pass to run: rule evaluation, queue delivery or both in that order",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Evaluate as if today were this ISO date (defaults to the current day)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum notifications delivered by the queue pass",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Run the requested notification passes."""

    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    initialize_database()

    session = SessionLocal()
    try:
        if args.job in (JOB_EVALUATE, JOB_ALL):
            evaluation = evaluate_rules(session, today=args.today)
            print(
                "Evaluation: "
                f"events={evaluation.events} created={evaluation.created} "
                f"duplicates={evaluation.duplicates} failed_rules={evaluation.failed_rules}"
            )
        if args.job in (JOB_PROCESS_QUEUE, JOB_ALL):
            queue = process_queue(session, limit=args.limit)
            print(f"Queue: delivered={queue.delivered} failed={queue.failed}")
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Notification job '%s' aborted", args.job)
        raise SystemExit(f"Database error while running '{args.job}': {exc}") from exc
    finally:
        session.close()


if __name__ == "__main__":
    main()
