# socialboard/api/posts/schemas.py
from marshmallow import Schema, fields, validate, validates, ValidationError

from socialboard.api.comments.schemas import CommentNodeSchema


class PostCreateSchema(Schema):
    """POST /api/posts 요청 본문의 유효성을 검사합니다."""
    content = fields.Str(required=True, validate=validate.Length(min=1, max=2000))

    @validates('content')
    def validate_not_blank(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("게시글 내용을 입력해주세요.")


class VoteRequestSchema(Schema):
    """POST .../vote 요청 본문. 'up'/'down' 도 허용합니다."""
    vote_type = fields.Str(
        required=True,
        validate=validate.OneOf(['like', 'dislike', 'up', 'down'], error="vote_type 은 like 또는 dislike 여야 합니다.")
    )


class VoteResponseSchema(Schema):
    """투표 처리 후의 집계 결과"""
    item_id = fields.Str(required=True)
    likes = fields.Int(required=True)
    dislikes = fields.Int(required=True)
    my_vote = fields.Str(allow_none=True)


class PostResponseSchema(Schema):
    """게시글 응답 형식. 피드/상세 조회에서는 댓글 트리가 포함됩니다."""
    post_id = fields.Str(required=True)
    user_id = fields.Str(required=True)
    author_name = fields.Str(required=True)
    content = fields.Str(required=True)
    likes = fields.Int(required=True)
    dislikes = fields.Int(required=True)
    created_at = fields.DateTime(allow_none=True)
    comments = fields.List(fields.Nested(CommentNodeSchema), dump_default=list)
    my_vote = fields.Str(dump_only=True, allow_none=True)
