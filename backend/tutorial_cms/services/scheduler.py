"""예약 작업 실행 패스를 일정 주기로 돌리는 백그라운드 러너입니다."""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from tutorial_cms.services.lifecycle_service import LifecycleCoordinator
from tutorial_cms.services.schedule_service import ExecutionResult
from tutorial_cms.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class ScheduledContentRunner:
    def __init__(
        self,
        session_factory: sessionmaker,
        interval_seconds: float,
        clock: Callable[[], datetime] = utcnow,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive: {interval_seconds}")
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> ExecutionResult:
        db = self.session_factory()
        try:
            return LifecycleCoordinator(db).run_due_actions(self.clock())
        finally:
            db.close()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                result = self.run_once()
                for message in result.errors:
                    logger.warning(message)
            except Exception:
                # 스레드 최상위 경계: 실패는 기록만 하고 다음 주기에 다시 시도한다.
                logger.exception("scheduled content pass failed")
            self._stop_event.wait(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            raise RuntimeError("scheduled content runner already running")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="scheduled-content", daemon=True)
        self._thread.start()
        logger.info("scheduled content runner started (every %ss)", self.interval_seconds)

    def stop(self, timeout: float = 5.0) -> None:
        if not self.running:
            return
        self._stop_event.set()
        self._thread.join(timeout)
        self._thread = None
        logger.info("scheduled content runner stopped")
