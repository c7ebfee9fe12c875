# socialboard/api/posts/services.py
import logging
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore

from socialboard.api.comments.services import CommentService
from socialboard.core.comment_tree import CommentTreeBuilder
from socialboard.core.errors import InvalidArgumentError, NotFoundError
from socialboard.models.post import Post
from socialboard.services.firestore_service import POSTS, backend_call, collection_ref, comments_ref
from socialboard.utils.datetime_utils import DateTimeUtils


class PostService:
    """
    게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    피드 조회 시 각 게시글의 댓글 트리를 함께 구성합니다.
    """
    def __init__(self, comment_service: CommentService, db=None, app_id: str = 'default-app-id'):
        self.db = db or firestore.client()
        self.app_id = app_id
        self.posts_ref = collection_ref(self.db, app_id, POSTS)
        self.comment_service = comment_service

    @staticmethod
    def sort_newest_first(posts: Iterable[Post]) -> List[Post]:
        """작성 시간 내림차순 정렬. created_at 이 아직 없는 게시글이 가장 앞에 옵니다."""
        return sorted(posts, key=lambda p: DateTimeUtils.created_at_sort_key(p.created_at), reverse=True)

    @backend_call("게시글 작성")
    def create_post(self, user_id: str, author_name: Optional[str], content: str) -> Dict[str, Any]:
        """새로운 게시글을 생성하고 Firestore에 저장합니다."""
        if not content or not content.strip():
            raise InvalidArgumentError("게시글 내용을 입력해주세요.")

        post_ref = self.posts_ref.document()
        new_post = Post(
            post_id=post_ref.id,
            user_id=user_id,
            author_name=author_name or 'Anonymous',
            content=content,
        )
        post_ref.set(DateTimeUtils.for_firestore(asdict(new_post)))
        logging.info(f"게시글 작성 완료 (user_id: {user_id}, post_id: {post_ref.id})")
        return asdict(new_post)

    @backend_call("피드 조회")
    def get_feed(self) -> List[Dict[str, Any]]:
        """
        모든 게시글을 최신순으로 반환합니다.
        각 게시글에는 댓글 트리('comments')가 포함됩니다.
        """
        docs = self.posts_ref.stream()
        posts = self.sort_newest_first(Post.from_dict(doc.id, doc.to_dict()) for doc in docs)
        feed = []
        for post in posts:
            post_data = asdict(post)
            comments = self.comment_service.list_comments(post.post_id)
            post_data['comments'] = [node.to_dict() for node in CommentTreeBuilder.build(comments)]
            feed.append(post_data)
        return feed

    @backend_call("게시글 조회")
    def get_post(self, post_id: str) -> Dict[str, Any]:
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            raise NotFoundError("게시물을 찾을 수 없습니다.")
        post_data = asdict(Post.from_dict(doc.id, doc.to_dict()))
        comments = self.comment_service.list_comments(post_id)
        post_data['comments'] = [node.to_dict() for node in CommentTreeBuilder.build(comments)]
        return post_data

    @backend_call("게시글 삭제")
    def delete_post(self, post_id: str, user_id: str) -> None:
        """
        게시글을 삭제합니다. (작성자 본인만 가능)
        comments 서브컬렉션은 자동으로 지워지지 않으므로 댓글을 먼저 삭제합니다.
        """
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists:
            raise NotFoundError("게시물을 찾을 수 없습니다.")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("게시글을 삭제할 권한이 없습니다.")

        for comment_doc in comments_ref(self.db, self.app_id, post_id).stream():
            comment_doc.reference.delete()
        post_ref.delete()
        logging.info(f"게시글 삭제 완료 (post_id: {post_id})")
