# socialboard/services/firestore_service.py
"""
Firestore 공용 헬퍼.

- 앱별 데이터 루트 경로(artifacts/{app_id}/public/data) 아래의 컬렉션 참조를 만듭니다.
- Firestore 호출 실패를 BackendUnavailableError 로 변환합니다. (재시도 없음)
"""
import logging
from functools import wraps

from google.api_core import exceptions as google_exceptions

from socialboard.core.errors import BackendUnavailableError, BoardError

USERS = 'users'
POSTS = 'posts'
COMMENTS = 'comments'
REVOKED_TOKENS = 'revoked_tokens'


def data_root(app_id: str) -> str:
    """앱 인스턴스별 공개 데이터 루트 경로"""
    return f"artifacts/{app_id}/public/data"


def collection_ref(db, app_id: str, name: str):
    """데이터 루트 아래의 최상위 컬렉션 참조 (users, posts, revoked_tokens)"""
    return db.collection(f"{data_root(app_id)}/{name}")


def comments_ref(db, app_id: str, post_id: str):
    """특정 게시글의 comments 서브컬렉션 참조"""
    return collection_ref(db, app_id, POSTS).document(post_id).collection(COMMENTS)


def backend_call(action: str):
    """
    서비스 메서드 데코레이터.
    도메인 예외(BoardError)와 PermissionError 는 그대로 전달하고,
    Firestore/Google API 오류는 로그를 남긴 뒤 BackendUnavailableError 로 바꿔 던집니다.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (BoardError, PermissionError):
                raise
            except google_exceptions.GoogleAPIError as e:
                logging.error(f"Firestore 호출 실패 ({action}): {e}", exc_info=True)
                raise BackendUnavailableError(f"{action} 중 저장소 오류가 발생했습니다.") from e
        return wrapper
    return decorator
