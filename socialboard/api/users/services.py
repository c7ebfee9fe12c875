# socialboard/api/users/services.py
from typing import Any, Dict, Optional

from firebase_admin import firestore

from socialboard.services.firestore_service import USERS, backend_call, collection_ref
from socialboard.utils.datetime_utils import DateTimeUtils


class UserService:
    """사용자 프로필 조회를 담당하는 서비스 클래스."""
    def __init__(self, db=None, app_id: str = 'default-app-id'):
        self.db = db or firestore.client()
        self.users_ref = collection_ref(self.db, app_id, USERS)

    @backend_call("사용자 프로필 조회")
    def get_user_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        """
        uid 로 사용자 문서를 조회합니다.
        :return: 사용자 데이터 딕셔너리 또는 None
        """
        doc = self.users_ref.document(uid).get()
        if not doc.exists:
            return None
        data = DateTimeUtils.from_firestore(doc.to_dict())
        data.setdefault('uid', uid)
        data['created_at'] = DateTimeUtils.to_utc(data.get('created_at'))
        return data
