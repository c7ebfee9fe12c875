# socialboard/utils/datetime_utils.py
"""
게시판 시간 처리 유틸리티

- 서버 내부의 모든 시간은 UTC timezone-aware datetime 입니다.
- Firestore 는 datetime 을 Timestamp 로 저장하지만, 다른 클라이언트가 쓴 문서에는
  created_at 이 ISO 문자열이나 아직 비어 있는 값(서버 타임스탬프 대기)으로 들어올 수 있습니다.
- 응답 직렬화(ISO 8601)는 marshmallow 스키마가 담당합니다.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Optional, Union

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """게시판 문서의 시간 필드 변환을 모아둔 클래스"""

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def from_timestamp(seconds: Union[int, float]) -> datetime:
        """Unix timestamp(초) -> UTC datetime. JWT 의 exp 클레임 변환에 사용합니다."""
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ValueError(f"timestamp는 숫자여야 합니다: {seconds!r}")
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    @staticmethod
    def to_utc(value: Any) -> Optional[datetime]:
        """
        created_at 등 단일 시간 값을 UTC datetime 으로 맞춥니다.

        - None -> None (아직 서버 시간이 채워지지 않은 문서)
        - naive datetime 은 UTC 로 간주
        - ISO 문자열('Z' 또는 오프셋 포함)은 dateutil 로 파싱
        - Timestamp 처럼 timestamp() 를 제공하는 객체도 허용

        :raises ValueError: 해석할 수 없는 값
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)
        if isinstance(value, str):
            try:
                parsed = dateutil_parser.isoparse(value)
            except (ValueError, OverflowError) as e:
                logger.warning(f"시간 문자열 파싱 실패: {value!r} - {e}")
                raise ValueError(f"잘못된 ISO 날짜 형식입니다: {value!r}") from e
            return DateTimeUtils.to_utc(parsed)
        if callable(getattr(value, 'timestamp', None)):
            return datetime.fromtimestamp(value.timestamp(), tz=timezone.utc)
        raise ValueError(f"시간 값으로 변환할 수 없습니다: {value!r}")

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """저장 직전 변환. 중첩된 dict/list 안의 date/datetime 까지 UTC datetime 으로 바꿉니다."""
        if isinstance(obj, datetime):
            return DateTimeUtils.to_utc(obj)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min, tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {key: DateTimeUtils.for_firestore(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        # DatetimeWithNanoseconds 도 datetime 하위 클래스라서 첫 분기에서 처리됨
        if isinstance(obj, datetime):
            return DateTimeUtils.to_utc(obj)
        if isinstance(obj, dict):
            return {key: DateTimeUtils.from_firestore(value) for key, value in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj

    @staticmethod
    def created_at_sort_key(dt: Optional[datetime]) -> float:
        """
        created_at 정렬 키. 아직 created_at 이 없는 문서(방금 작성됨)는 가장 최근 문서로 취급합니다.
        """
        if dt is None:
            return float('inf')
        return DateTimeUtils.to_utc(dt).timestamp()


def now() -> datetime:
    return DateTimeUtils.now()

def to_utc(value: Any) -> Optional[datetime]:
    return DateTimeUtils.to_utc(value)

def for_firestore(obj: Any) -> Any:
    return DateTimeUtils.for_firestore(obj)

def from_firestore(obj: Any) -> Any:
    return DateTimeUtils.from_firestore(obj)
