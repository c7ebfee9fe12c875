# socialboard/api/comments/services.py

import logging
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from socialboard.core.comment_tree import CommentNode, CommentTreeBuilder
from socialboard.core.errors import InvalidArgumentError, NotFoundError
from socialboard.models.comment import Comment
from socialboard.services.firestore_service import POSTS, backend_call, collection_ref, comments_ref
from socialboard.utils.datetime_utils import DateTimeUtils


class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글은 posts/{post_id}/comments 서브컬렉션에 저장됩니다.
    - 답글은 parent_comment_id 로 최상위 댓글을 가리킵니다. (1단계 중첩)
    """
    def __init__(self, db=None, app_id: str = 'default-app-id'):
        self.db = db or firestore.client()
        self.app_id = app_id
        self.posts_ref = collection_ref(self.db, app_id, POSTS)

    def _comments_ref(self, post_id: str):
        return comments_ref(self.db, self.app_id, post_id)

    @staticmethod
    def sort_oldest_first(comments: Iterable[Comment]) -> List[Comment]:
        """작성 시간 오름차순 정렬. created_at 이 아직 없는 댓글은 마지막에 둡니다."""
        return sorted(comments, key=lambda c: DateTimeUtils.created_at_sort_key(c.created_at))

    @backend_call("댓글 작성")
    def create_comment(self, post_id: str, user_id: str, author_name: Optional[str], content: str,
                       parent_comment_id: Optional[str] = None) -> Dict[str, Any]:
        """
        새로운 댓글(또는 답글)을 생성합니다.
        - 답글의 답글은 해당 답글의 최상위 댓글에 붙입니다.

        :raises InvalidArgumentError: 내용이 비어 있는 경우
        :raises NotFoundError: 게시글, 부모 댓글 또는 스레드의 최상위 댓글이 없는 경우
        """
        if not content or not content.strip():
            raise InvalidArgumentError("댓글 내용을 입력해주세요.")

        if not self.posts_ref.document(post_id).get().exists:
            raise NotFoundError("댓글을 작성할 게시물이 존재하지 않습니다.")

        comments = self._comments_ref(post_id)
        if parent_comment_id:
            parent_doc = comments.document(parent_comment_id).get()
            if not parent_doc.exists:
                raise NotFoundError("답글을 작성할 댓글이 존재하지 않습니다.")
            root_comment_id = parent_doc.to_dict().get('parent_comment_id')
            if root_comment_id:
                # 최상위 댓글이 없는 스레드에 붙이면 화면에 표시되지 않는다
                root_doc = comments.document(root_comment_id).get()
                if not root_doc.exists or root_doc.to_dict().get('parent_comment_id'):
                    raise NotFoundError("답글을 작성할 스레드의 원 댓글이 존재하지 않습니다.")
                parent_comment_id = root_comment_id

        comment_ref = comments.document()
        new_comment = Comment(
            comment_id=comment_ref.id,
            post_id=post_id,
            user_id=user_id,
            author_name=author_name or 'Anonymous',
            content=content,
            parent_comment_id=parent_comment_id or None,
        )
        comment_ref.set(DateTimeUtils.for_firestore(asdict(new_comment)))
        logging.info(f"댓글 작성 완료 (post_id: {post_id}, comment_id: {comment_ref.id}, parent: {parent_comment_id})")
        return asdict(new_comment)

    @backend_call("댓글 목록 조회")
    def list_comments(self, post_id: str) -> List[Comment]:
        """게시글의 모든 댓글을 작성 시간 순으로 반환합니다."""
        # created_at 이 없는 문서도 포함해야 하므로 order_by 대신 조회 후 정렬
        docs = self._comments_ref(post_id).stream()
        return self.sort_oldest_first(Comment.from_dict(doc.id, post_id, doc.to_dict()) for doc in docs)

    @backend_call("댓글 트리 조회")
    def get_comment_tree(self, post_id: str) -> List[CommentNode]:
        """게시글의 댓글을 최상위 댓글 + 직접 답글 구조로 반환합니다."""
        if not self.posts_ref.document(post_id).get().exists:
            raise NotFoundError("게시물을 찾을 수 없습니다.")
        return CommentTreeBuilder.build(self.list_comments(post_id))

    @backend_call("댓글 삭제")
    def delete_comment(self, post_id: str, comment_id: str, user_id: str) -> None:
        """
        댓글을 삭제합니다. (작성자 본인만 가능)
        최상위 댓글을 삭제하면 그 댓글의 답글도 함께 삭제합니다.
        """
        comments = self._comments_ref(post_id)
        comment_ref = comments.document(comment_id)
        comment_doc = comment_ref.get()
        if not comment_doc.exists:
            raise NotFoundError("삭제할 댓글이 없습니다.")
        if comment_doc.to_dict().get('user_id') != user_id:
            raise PermissionError("댓글을 삭제할 권한이 없습니다.")

        replies = comments.where(filter=FieldFilter('parent_comment_id', '==', comment_id)).stream()
        for reply in replies:
            reply.reference.delete()
        comment_ref.delete()
        logging.info(f"댓글 삭제 완료 (post_id: {post_id}, comment_id: {comment_id})")
