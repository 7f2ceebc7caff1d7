"""시각 정규화와 콘텐츠 식별자 생성에 쓰는 공용 헬퍼입니다."""

import uuid
from datetime import datetime, timezone


def utcnow() -> datetime:
    # DB에는 tz 정보 없는 UTC 시각으로 저장한다.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value) -> datetime:
    """datetime 또는 ISO-8601 문자열을 tz 없는 UTC datetime으로 변환합니다.

    형식이 잘못된 값은 ValueError를 던집니다.
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_naive_utc(datetime.fromisoformat(text))


def new_content_id() -> str:
    return uuid.uuid4().hex
