# socialboard/api/posts/routes.py
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, get_jwt
from marshmallow import ValidationError

from socialboard.api.posts.schemas import PostCreateSchema, PostResponseSchema, VoteRequestSchema, VoteResponseSchema
from socialboard.services.vote_service import annotate_viewer_votes

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    """
    새로운 게시글을 생성합니다.
    - 성공 시, 생성된 게시글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        data = PostCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    new_post = post_service.create_post(user_id, get_jwt().get('display_name'), data['content'])
    return jsonify(PostResponseSchema().dump(new_post)), 201


@posts_bp.route('', methods=['GET'])
@jwt_required(optional=True) # 비로그인 사용자도 피드는 볼 수 있도록 허용
def get_feed():
    """
    게시글 피드를 최신순으로 조회합니다. 각 게시글에는 댓글 트리가 포함됩니다.
    실시간 구독이 켜져 있으면 구독 중인 피드를 그대로 반환합니다.
    """
    feed_watcher = current_app.services.get('feed')
    if feed_watcher is not None and feed_watcher.is_running:
        posts = feed_watcher.snapshot()
    else:
        posts = current_app.services['posts'].get_feed()

    annotate_viewer_votes(posts, get_jwt_identity())
    return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200


@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required(optional=True)
def get_post(post_id: str):
    """특정 게시글과 댓글 트리를 조회합니다."""
    post = current_app.services['posts'].get_post(post_id)
    annotate_viewer_votes([post], get_jwt_identity())
    return jsonify(PostResponseSchema().dump(post)), 200


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """특정 게시글을 삭제합니다. (작성자 본인만 가능)"""
    post_service = current_app.services['posts']
    try:
        post_service.delete_post(post_id, get_jwt_identity())
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403


@posts_bp.route('/<string:post_id>/vote', methods=['POST'])
@jwt_required()
def vote_on_post(post_id: str):
    """
    게시글에 좋아요/싫어요를 누릅니다.
    - 같은 유형을 다시 누르면 취소, 반대 유형을 누르면 변경됩니다.
    """
    vote_service = current_app.services['votes']
    user_id = get_jwt_identity()
    try:
        data = VoteRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    updated = vote_service.vote_on_post(user_id, post_id, data['vote_type'])
    vote = updated.vote_of(user_id)
    return jsonify(VoteResponseSchema().dump({
        "item_id": updated.item_id,
        "likes": updated.likes,
        "dislikes": updated.dislikes,
        "my_vote": vote.value if vote else None,
    })), 200
