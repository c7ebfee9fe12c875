# socialboard/api/users/schemas.py
from marshmallow import Schema, fields


class UserPublicResponseSchema(Schema):
    """다른 사용자에게 공개되는 프로필 정보"""
    uid = fields.Str(required=True)
    display_name = fields.Str(required=True)
    created_at = fields.DateTime(allow_none=True)


class UserPrivateResponseSchema(UserPublicResponseSchema):
    """본인 프로필 조회 응답 (차단 여부 포함)"""
    is_banned = fields.Bool(dump_default=False)
