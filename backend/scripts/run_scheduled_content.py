"""Run due scheduled publish/unpublish/delete actions (cron entry point)."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import logging
import time

from tutorial_cms.config import settings
from tutorial_cms.database import SessionLocal
from tutorial_cms.errors import StoreUnavailableError
from tutorial_cms.services.scheduler import ScheduledContentRunner


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="예약된 콘텐츠 작업을 실행합니다.")
    parser.add_argument("--loop", action="store_true", help="중단할 때까지 주기적으로 실행")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.SCHEDULER_INTERVAL_SECONDS,
        help="--loop 실행 주기(초)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    runner = ScheduledContentRunner(SessionLocal, args.interval)

    if args.loop:
        runner.start()
        try:
            while runner.running:
                time.sleep(1)
        except KeyboardInterrupt:
            print("\nStopping...")
        finally:
            runner.stop()
        return 0

    try:
        result = runner.run_once()
    except StoreUnavailableError as exc:
        print(f"Store unavailable: {exc.message}")
        return 2
    print(f"Executed {result.executed_count} scheduled items")
    for message in result.errors:
        print(f"  - {message}")
    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main())
