# socialboard/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
    get_jwt,
)
from marshmallow import ValidationError

from socialboard.api.auth.schemas import SessionCreateSchema, LogoutRequestSchema, UserInfoSchema
from socialboard.core.errors import InvalidArgumentError
from socialboard.utils.datetime_utils import DateTimeUtils
from .services import auth_service

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/session', methods=['POST'])
def create_session():
    """
    Firebase ID 토큰으로 로그인합니다.
    - 최초 로그인 시 users 문서를 생성합니다.
    - 차단된 사용자는 403 으로 거부합니다.
    """
    identity_service = current_app.services['identity']
    try:
        data = SessionCreateSchema().load(request.get_json(silent=True) or {})
        identity = identity_service.verify_id_token(data['id_token'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except InvalidArgumentError as e:
        return jsonify({"error_code": "INVALID_ID_TOKEN", "message": str(e)}), 401

    user, is_new_user = auth_service.get_or_create_user(identity)
    if user.is_banned:
        logging.warning(f"차단된 사용자의 로그인 시도: {user.uid}")
        return jsonify({"error_code": "ACCOUNT_BANNED", "message": "차단된 계정입니다. 로그아웃 되었습니다."}), 403

    claims = {"display_name": user.display_name}
    access_token = create_access_token(identity=user.uid, additional_claims=claims)
    refresh_token = create_refresh_token(identity=user.uid, additional_claims=claims)

    return jsonify({
        "access_token": access_token,
        "refresh_token": refresh_token,
        "is_new_user": is_new_user,
        "user_info": UserInfoSchema().dump(user),
    }), 200


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True) # Refresh Token만 허용
def refresh_token():
    """
    유효한 Refresh Token으로 새로운 Access Token을 발급합니다.
    로그인 이후 차단된 사용자는 거부하고, 전달된 Refresh Token 도 무효화합니다.
    """
    current_user_id = get_jwt_identity()
    refresh_claims = get_jwt()
    user = auth_service.get_user(current_user_id)
    if user is None:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    if user.is_banned:
        auth_service.add_token_to_blocklist(refresh_claims['jti'], DateTimeUtils.from_timestamp(refresh_claims['exp']))
        logging.warning(f"차단된 사용자의 토큰 재발급 시도: {current_user_id}")
        return jsonify({"error_code": "ACCOUNT_BANNED", "message": "차단된 계정입니다. 로그아웃 되었습니다."}), 403

    claims = {"display_name": refresh_claims.get("display_name")}
    new_access_token = create_access_token(identity=current_user_id, additional_claims=claims)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    try:
        data = LogoutRequestSchema().load(request.get_json(silent=True) or {})

        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 만료된 토큰도 무효화할 수 있도록 만료 검사는 생략
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(
            decoded_access['jti'], decoded_access['exp'],
            decoded_refresh['jti'], decoded_refresh['exp']
        )
        return jsonify({"message": "로그아웃 되었습니다."}), 200

    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except (jwt.PyJWTError, KeyError) as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
