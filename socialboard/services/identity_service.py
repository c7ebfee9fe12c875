# 파일 경로: socialboard/services/identity_service.py

import logging
from typing import Any, Dict

from firebase_admin import auth as firebase_auth

from socialboard.core.errors import BackendUnavailableError, InvalidArgumentError

ANONYMOUS_NAME = "Anonymous"


class IdentityService:
    """
    Firebase Authentication 이 발급한 ID 토큰을 검증하는 서비스 클래스입니다.
    클라이언트는 Google 로그인 또는 익명 로그인 후 받은 ID 토큰을 그대로 전달합니다.
    """

    @staticmethod
    def verify_id_token(id_token: str) -> Dict[str, Any]:
        """
        ID 토큰을 검증하고 uid / 표시 이름 / 로그인 제공자를 반환합니다.

        :raises InvalidArgumentError: 토큰이 비어 있거나, 위조/만료/폐기된 경우
        :raises BackendUnavailableError: 공개 키 조회 등 Firebase 통신에 실패한 경우
        """
        if not id_token:
            raise InvalidArgumentError("ID 토큰이 필요합니다.")
        try:
            decoded = firebase_auth.verify_id_token(id_token, check_revoked=True)
        except (firebase_auth.InvalidIdTokenError,
                firebase_auth.ExpiredIdTokenError,
                firebase_auth.RevokedIdTokenError,
                firebase_auth.UserDisabledError) as e:
            logging.warning(f"Firebase ID 토큰 검증 실패: {e}")
            raise InvalidArgumentError("유효하지 않은 ID 토큰입니다.") from e
        except firebase_auth.CertificateFetchError as e:
            logging.error(f"Firebase 공개 키 조회 실패: {e}", exc_info=True)
            raise BackendUnavailableError("인증 서버와 통신할 수 없습니다.") from e

        provider = decoded.get('firebase', {}).get('sign_in_provider')
        return {
            'uid': decoded['uid'],
            'display_name': decoded.get('name') or ANONYMOUS_NAME,
            'provider': provider,
            'is_anonymous': provider == 'anonymous',
        }
