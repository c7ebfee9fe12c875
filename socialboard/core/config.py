# socialboard/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다. (.env 값은 socialboard/__init__.py 에서 먼저 로드됨)


def _env_flag(name: str, default: str = 'false') -> bool:
    """'1', 'true', 'yes', 'on' 을 True 로 해석합니다."""
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명에 사용하는 비밀 키
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    # 모든 컬렉션은 artifacts/{APP_ID}/public/data/ 아래에 저장됩니다.
    # 같은 Firebase 프로젝트를 여러 앱 인스턴스가 나눠 쓸 수 있도록 분리하는 값입니다.
    APP_ID = os.getenv('APP_ID', 'default-app-id')

    # 투표 저장 방식
    # - 'transaction': Firestore 트랜잭션 안에서 읽고 씀 (동시 투표 시 SDK가 재시도)
    # - 'snapshot': 읽은 뒤 별도 update 호출로 씀 (동시 투표 시 나중 쓰기가 앞 쓰기를 덮어씀)
    VOTE_WRITE_MODE = os.getenv('VOTE_WRITE_MODE', 'transaction')

    # True 이면 Firestore 실시간 구독으로 피드를 메모리에 유지하고 GET /api/posts 에서 사용합니다.
    FEED_LIVE_SYNC = _env_flag('FEED_LIVE_SYNC')


class DevelopmentConfig(Config):
    """개발 환경 설정"""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경 설정. Firestore 는 테스트 더블을 주입해서 사용합니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'testing-secret-key-please-change-me-0123456789')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    APP_ID = 'test-app'
    FEED_LIVE_SYNC = False


class ProductionConfig(Config):
    """운영 환경 설정"""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


# FLASK_ENV 값에 따라 create_app 에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
