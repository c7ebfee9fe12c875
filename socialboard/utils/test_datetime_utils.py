# socialboard/utils/test_datetime_utils.py
"""
시간 처리 유틸리티 테스트

사용법: python -m pytest socialboard/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from socialboard.models.post import Post
from socialboard.utils.datetime_utils import DateTimeUtils, to_utc

KST = timezone(timedelta(hours=9))


def test_to_utc_accepts_iso_strings():
    """다른 클라이언트가 문자열로 저장한 created_at 도 UTC 로 정규화되어야 함"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T19:30:00+09:00",
        "2024-01-15T10:30:00",
    ]

    for iso_string in test_cases:
        dt = to_utc(iso_string)
        assert dt == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert dt.tzinfo == timezone.utc


def test_to_utc_other_values():
    assert to_utc(None) is None
    assert to_utc(datetime(2024, 1, 15, 19, 30, tzinfo=KST)).hour == 10
    assert to_utc(datetime(2024, 1, 15, 10, 30)).tzinfo == timezone.utc

    with pytest.raises(ValueError):
        to_utc("not-a-date")
    with pytest.raises(ValueError):
        to_utc(12345)


def test_from_timestamp():
    assert DateTimeUtils.from_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    with pytest.raises(ValueError):
        DateTimeUtils.from_timestamp("1700000000")


def test_for_firestore():
    """저장 직전 변환 테스트"""
    test_data = {
        'created_at': datetime(2024, 1, 15, 10, 30),
        'nested': {'event_date': date(2023, 12, 25)},
        'list_data': [{'created_at': datetime(2024, 1, 1)}],
        'content': 'hello',
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['nested']['event_date'] == datetime(2023, 12, 25, tzinfo=timezone.utc)
    assert converted['list_data'][0]['created_at'].tzinfo == timezone.utc
    assert converted['content'] == 'hello'


def test_from_firestore():
    data = {
        'created_at': datetime(2024, 1, 15, 19, 30, tzinfo=KST),
        'comments': [{'created_at': datetime(2024, 1, 1)}],
        'likes': 3,
    }

    converted = DateTimeUtils.from_firestore(data)

    assert converted['created_at'] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['comments'][0]['created_at'].tzinfo == timezone.utc
    assert converted['likes'] == 3


def test_created_at_sort_key():
    """created_at 이 없는 문서는 가장 최근으로 취급"""
    older = datetime(2024, 1, 1, tzinfo=timezone.utc)
    newer = datetime(2024, 1, 2)

    assert DateTimeUtils.created_at_sort_key(older) < DateTimeUtils.created_at_sort_key(newer)
    assert DateTimeUtils.created_at_sort_key(None) > DateTimeUtils.created_at_sort_key(newer)


def test_model_reads_string_created_at():
    post = Post.from_dict('p1', {'user_id': 'u1', 'content': 'hi', 'created_at': '2024-05-01T12:00:00Z'})

    assert post.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert post.author_name == 'Anonymous'


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
