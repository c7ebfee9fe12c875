# socialboard/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import atexit
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정 / 공통
from socialboard.core.config import config_by_name
from socialboard.core.errors import BoardError
from socialboard.core.security import register_jwt_callbacks

# - API 블루프린트
from socialboard.api.auth.routes import auth_bp
from socialboard.api.users.routes import users_bp
from socialboard.api.posts.routes import posts_bp
from socialboard.api.comments.routes import comments_bp

# - 서비스 모듈
from socialboard.api.auth import services as auth_service_module
from socialboard.api.users.services import UserService
from socialboard.api.posts.services import PostService
from socialboard.api.comments.services import CommentService
from socialboard.services.identity_service import IdentityService
from socialboard.services.vote_service import VoteService
from socialboard.services.feed_watcher import FeedWatcher


def create_app(config_name: str = None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production'. 없으면 FLASK_ENV 를 사용합니다.
    :param db: Firestore 클라이언트. 없으면 서비스 계정 키로 firebase_admin 을 초기화해 생성합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    if db is None:
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app_id = app.config['APP_ID']
    app.services = {}

    app.services['identity'] = IdentityService()
    app.services['users'] = UserService(db=db, app_id=app_id)
    app.services['comments'] = CommentService(db=db, app_id=app_id)
    app.services['posts'] = PostService(comment_service=app.services['comments'], db=db, app_id=app_id)
    app.services['votes'] = VoteService(db=db, app_id=app_id, write_mode=app.config['VOTE_WRITE_MODE'])
    logging.info(f"Vote service initialized (write_mode: {app.config['VOTE_WRITE_MODE']})")

    # - 인증 서비스 (앱 설정 필요)
    auth_service_module.auth_service.init_app(app, db=db)
    register_jwt_callbacks(jwt, auth_service_module.auth_service)

    # - 실시간 피드 구독 (선택적)
    if app.config['FEED_LIVE_SYNC']:
        feed_watcher = FeedWatcher(db=db, app_id=app_id)
        feed_watcher.start()
        atexit.register(feed_watcher.stop)
        app.services['feed'] = feed_watcher

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(BoardError)
    def handle_board_error(err):
        # InvalidArgument(400) / NotFound(404) / BackendUnavailable(503)
        if err.status_code >= 500:
            logging.error(f"{err.error_code}: {err.message}")
        response = {"error_code": err.error_code, "message": err.message}
        return jsonify(response), err.status_code

    @app.errorhandler(PermissionError)
    def handle_permission_error(err):
        return jsonify({"error_code": "FORBIDDEN", "message": str(err)}), 403

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
