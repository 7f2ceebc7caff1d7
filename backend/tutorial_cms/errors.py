"""콘텐츠 라이프사이클 엔진의 도메인 예외와 부분 실행 실패 기록 타입입니다.

단건 연산은 아래 예외를 그대로 호출자에게 던지고, 예약 작업 일괄 실행은
항목별 실패를 ``PartialExecutionFailure`` 목록으로 모아 결과에 담습니다.
HTTP 계층에서는 ``main.py``의 예외 핸들러가 ``status_code``/``code``로 변환합니다.
"""

from dataclasses import dataclass


class LifecycleError(Exception):
    status_code = 400
    code = "lifecycle_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LifecycleError):
    status_code = 404
    code = "not_found"


class AlreadyPendingError(LifecycleError):
    status_code = 409
    code = "already_pending"


class InvalidArgumentError(LifecycleError):
    status_code = 400
    code = "invalid_argument"


class InvalidStateTransitionError(LifecycleError):
    status_code = 409
    code = "invalid_state_transition"


class ConcurrencyConflictError(LifecycleError):
    status_code = 409
    code = "concurrency_conflict"


class StoreUnavailableError(LifecycleError):
    status_code = 503
    code = "store_unavailable"


@dataclass(frozen=True)
class PartialExecutionFailure:
    scheduled_id: int
    content_type: str
    content_id: str
    action: str
    message: str

    def describe(self) -> str:
        return f"Failed to execute {self.action} for {self.content_type} {self.content_id}: {self.message}"
