# socialboard/core/security.py
from flask import jsonify
from flask_jwt_extended import JWTManager


def register_jwt_callbacks(jwt: JWTManager, auth_service) -> None:
    """
    flask-jwt-extended 콜백 등록.
    - 로그아웃으로 무효화된 토큰(jti)은 모든 보호된 엔드포인트에서 거부합니다.
    - 토큰 오류 응답을 다른 API 와 같은 error_code 형식으로 맞춥니다.
    """

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload: dict) -> bool:
        return auth_service.is_token_revoked(jwt_payload)

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_REVOKED", "message": "로그아웃된 토큰입니다. 다시 로그인해주세요."}), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_EXPIRED", "message": "토큰이 만료되었습니다."}), 401

    @jwt.unauthorized_loader
    def missing_token_callback(reason: str):
        return jsonify({"error_code": "AUTHORIZATION_REQUIRED", "message": "로그인이 필요합니다."}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason: str):
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
