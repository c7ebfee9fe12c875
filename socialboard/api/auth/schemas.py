#socialboard/api/auth/schemas.py
from marshmallow import Schema, fields


class SessionCreateSchema(Schema):
    """로그인(세션 생성) 요청의 유효성을 검사하는 스키마"""
    id_token = fields.Str(
        required=True,
        metadata={"description": "Firebase Authentication 이 발급한 ID 토큰 (Google 또는 익명 로그인)"}
    )


class LogoutRequestSchema(Schema):
    """로그아웃 요청의 유효성을 검사하는 스키마"""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)


class UserInfoSchema(Schema):
    """로그인 응답에 포함되는 사용자 정보"""
    uid = fields.Str(required=True)
    display_name = fields.Str(required=True)
    created_at = fields.DateTime(allow_none=True)
