# socialboard/api/auth/services.py
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from firebase_admin import firestore

from socialboard.models.user import User
from socialboard.services.firestore_service import REVOKED_TOKENS, USERS, backend_call, collection_ref
from socialboard.utils.datetime_utils import DateTimeUtils


class AuthService:
    def __init__(self):
        self.db = None
        self.users_ref = None
        self.revoked_tokens_ref = None

    def init_app(self, app, db=None):
        """앱 초기화 과정에서 호출되어 DB 연결 및 컬렉션 참조를 설정합니다."""
        self.db = db or firestore.client()
        app_id = app.config['APP_ID']
        self.users_ref = collection_ref(self.db, app_id, USERS)
        self.revoked_tokens_ref = collection_ref(self.db, app_id, REVOKED_TOKENS)

    @staticmethod
    def _user_from_document(uid: str, data: Dict[str, Any], default_name: str = 'Anonymous') -> User:
        data = DateTimeUtils.from_firestore(data or {})
        return User(
            uid=uid,
            display_name=data.get('display_name') or default_name,
            is_banned=bool(data.get('is_banned', False)),
            created_at=DateTimeUtils.to_utc(data.get('created_at')),
        )

    @backend_call("사용자 조회")
    def get_user(self, uid: str) -> Optional[User]:
        """users 문서를 다시 읽습니다. 토큰 재발급 시 차단 여부 확인에 사용합니다."""
        user_doc = self.users_ref.document(uid).get()
        if not user_doc.exists:
            return None
        return self._user_from_document(uid, user_doc.to_dict())

    @backend_call("사용자 조회/생성")
    def get_or_create_user(self, identity: Dict[str, Any]) -> Tuple[User, bool]:
        """
        Firebase 인증 정보(uid, display_name)로 사용자 문서를 찾거나 새로 만듭니다.
        기존 사용자의 표시 이름은 users 문서에 저장된 값을 우선합니다.

        :return: (User, 신규 가입 여부)
        """
        uid = identity['uid']
        user_ref = self.users_ref.document(uid)
        user_doc = user_ref.get()

        if user_doc.exists:
            return self._user_from_document(uid, user_doc.to_dict(), identity['display_name']), False

        new_user = User(uid=uid, display_name=identity['display_name'])
        user_ref.set(DateTimeUtils.for_firestore(asdict(new_user)))
        logging.info(f"신규 사용자 생성: {uid}")
        return new_user, True

    # --- Blocklist 관련 로직 ---
    @backend_call("토큰 무효화")
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        token_data = {
            'revoked_at': DateTimeUtils.now(),
            'expires_at': expires
        }
        self.revoked_tokens_ref.document(jti).set(DateTimeUtils.for_firestore(token_data))

    @backend_call("토큰 무효화 여부 확인")
    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        return self.revoked_tokens_ref.document(jti).get().exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, DateTimeUtils.from_timestamp(access_exp))
        self.add_token_to_blocklist(refresh_jti, DateTimeUtils.from_timestamp(refresh_exp))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")


auth_service = AuthService()
