# socialboard/models/user.py
from dataclasses import dataclass, field
from datetime import datetime

from socialboard.utils.datetime_utils import DateTimeUtils


@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID 는 Firebase Auth 의 uid 와 동일합니다.
    """
    uid: str
    display_name: str
    is_banned: bool = False  # 관리자가 콘솔에서 직접 설정
    created_at: datetime = field(default_factory=DateTimeUtils.now)
