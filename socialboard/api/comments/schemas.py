# socialboard/api/comments/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError


class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    댓글(또는 답글) 생성을 요청할 때의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    content = fields.Str(required=True, validate=validate.Length(min=1, max=1000, error="댓글은 1~1000자 사이여야 합니다."))
    parent_comment_id = fields.Str(load_default=None, allow_none=True)

    @validates('content')
    def validate_not_blank(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("댓글 내용을 입력해주세요.")


class CommentResponseSchema(Schema):
    """댓글 한 개의 응답 형식"""
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    user_id = fields.Str(required=True)
    author_name = fields.Str(required=True)
    content = fields.Str(required=True)
    parent_comment_id = fields.Str(allow_none=True)
    likes = fields.Int(required=True)
    dislikes = fields.Int(required=True)
    created_at = fields.DateTime(allow_none=True)
    my_vote = fields.Str(dump_only=True, allow_none=True)


class CommentNodeSchema(CommentResponseSchema):
    """댓글 트리의 노드. replies 에는 직접 답글만 포함됩니다."""
    replies = fields.List(fields.Nested(CommentResponseSchema), dump_default=list)
