# socialboard/core/errors.py
"""
서비스 계층에서 발생시키는 도메인 예외 정의.

라우트에서는 error_code / status_code 를 그대로 응답에 사용합니다.
(app 팩토리의 전역 에러 핸들러 참고)
"""


class BoardError(Exception):
    """모든 도메인 예외의 기반 클래스."""
    error_code = "BOARD_ERROR"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(BoardError, ValueError):
    """잘못된 투표 유형, 필수 필드 누락 등 호출자 입력 오류."""
    error_code = "INVALID_ARGUMENT"
    status_code = 400


class NotFoundError(BoardError, LookupError):
    """업데이트 시점에 대상 문서(게시글/댓글/사용자)가 존재하지 않음."""
    error_code = "RESOURCE_NOT_FOUND"
    status_code = 404


class BackendUnavailableError(BoardError):
    """Firestore / Firebase 호출 실패. 재시도하지 않습니다."""
    error_code = "BACKEND_UNAVAILABLE"
    status_code = 503
