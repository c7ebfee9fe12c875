# socialboard/api/comments/routes.py
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from marshmallow import ValidationError

from socialboard.api.comments.schemas import CommentCreateSchema, CommentResponseSchema, CommentNodeSchema
from socialboard.api.posts.schemas import VoteRequestSchema, VoteResponseSchema
from socialboard.services.vote_service import annotate_viewer_votes

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/posts/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    """
    특정 게시글에 댓글 또는 답글(parent_comment_id 지정)을 작성합니다.
    - 성공 시, 생성된 댓글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    comment_service = current_app.services['comments']
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    new_comment = comment_service.create_comment(
        post_id, get_jwt_identity(), get_jwt().get('display_name'),
        data['content'], data.get('parent_comment_id')
    )
    return jsonify(CommentResponseSchema().dump(new_comment)), 201


@comments_bp.route('/posts/<string:post_id>/comments', methods=['GET'])
@jwt_required(optional=True)
def get_comments(post_id: str):
    """특정 게시글의 댓글을 최상위 댓글 + 직접 답글 구조로 조회합니다."""
    comment_service = current_app.services['comments']
    forest = [node.to_dict() for node in comment_service.get_comment_tree(post_id)]
    annotate_viewer_votes([{"comments": forest}], get_jwt_identity())
    return jsonify({"comments": CommentNodeSchema(many=True).dump(forest)}), 200


@comments_bp.route('/posts/<string:post_id>/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(post_id: str, comment_id: str):
    """특정 댓글을 삭제합니다. (작성자 본인만 가능, 답글도 함께 삭제)"""
    comment_service = current_app.services['comments']
    try:
        comment_service.delete_comment(post_id, comment_id, get_jwt_identity())
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403


@comments_bp.route('/posts/<string:post_id>/comments/<string:comment_id>/vote', methods=['POST'])
@jwt_required()
def vote_on_comment(post_id: str, comment_id: str):
    """댓글에 좋아요/싫어요를 누르거나 취소합니다."""
    vote_service = current_app.services['votes']
    user_id = get_jwt_identity()
    try:
        data = VoteRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    updated = vote_service.vote_on_comment(user_id, post_id, comment_id, data['vote_type'])
    vote = updated.vote_of(user_id)
    return jsonify(VoteResponseSchema().dump({
        "item_id": updated.item_id,
        "likes": updated.likes,
        "dislikes": updated.dislikes,
        "my_vote": vote.value if vote else None,
    })), 200
