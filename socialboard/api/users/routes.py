# socialboard/api/users/routes.py
from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from socialboard.api.users.schemas import UserPublicResponseSchema, UserPrivateResponseSchema

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """현재 로그인된 사용자의 프로필을 조회합니다."""
    user_service = current_app.services['users']
    user_profile = user_service.get_user_profile(get_jwt_identity())
    if not user_profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPrivateResponseSchema().dump(user_profile)), 200


@users_bp.route('/<string:uid>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(uid: str):
    """특정 사용자의 공개 프로필 정보를 조회합니다."""
    user_service = current_app.services['users']
    user_profile = user_service.get_user_profile(uid)
    if not user_profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPublicResponseSchema().dump(user_profile)), 200
