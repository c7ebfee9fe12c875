# socialboard/utils/__init__.py
"""
공통 유틸리티 패키지
"""

from .datetime_utils import (
    DateTimeUtils,
    now, to_utc,
    for_firestore, from_firestore,
)

__all__ = [
    'DateTimeUtils',
    'now', 'to_utc',
    'for_firestore', 'from_firestore',
]
