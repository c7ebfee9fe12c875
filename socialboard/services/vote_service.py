# socialboard/services/vote_service.py
import logging
from typing import Any, Dict, List, Optional, Union

from firebase_admin import firestore

from socialboard.core.errors import InvalidArgumentError, NotFoundError
from socialboard.core.vote_ledger import VotableItem, VoteLedger, VoteType
from socialboard.services.firestore_service import POSTS, backend_call, collection_ref, comments_ref

WRITE_MODE_TRANSACTION = 'transaction'
WRITE_MODE_SNAPSHOT = 'snapshot'


class VoteService:
    """
    게시글/댓글 좋아요·싫어요를 Firestore 에 반영하는 서비스 클래스.
    상태 전이 계산은 VoteLedger 가 담당하고, 이 클래스는 읽기/쓰기만 담당합니다.

    write_mode
    - 'transaction': 트랜잭션 안에서 읽고 씁니다. 다른 사용자가 동시에 투표해도 누락되지 않습니다.
    - 'snapshot': 문서를 읽고 별도의 update 호출로 씁니다. 두 사용자가 같은 상태를 읽고
      동시에 쓰면 나중 쓰기가 앞의 쓰기를 덮어써 카운트가 누락될 수 있습니다.
    """
    def __init__(self, db=None, app_id: str = 'default-app-id', write_mode: str = WRITE_MODE_TRANSACTION):
        if write_mode not in (WRITE_MODE_TRANSACTION, WRITE_MODE_SNAPSHOT):
            raise ValueError(f"지원하지 않는 VOTE_WRITE_MODE 입니다: {write_mode}")
        self.db = db or firestore.client()
        self.app_id = app_id
        self.write_mode = write_mode
        self.posts_ref = collection_ref(self.db, app_id, POSTS)

    @backend_call("게시글 투표")
    def vote_on_post(self, user_id: str, post_id: str, vote_type: Union[VoteType, str]) -> VotableItem:
        """게시글에 좋아요/싫어요를 누르거나 취소합니다."""
        doc_ref = self.posts_ref.document(post_id)
        return self._apply(doc_ref, user_id, vote_type, "게시글을 찾을 수 없습니다.")

    @backend_call("댓글 투표")
    def vote_on_comment(self, user_id: str, post_id: str, comment_id: str, vote_type: Union[VoteType, str]) -> VotableItem:
        """댓글에 좋아요/싫어요를 누르거나 취소합니다."""
        doc_ref = comments_ref(self.db, self.app_id, post_id).document(comment_id)
        return self._apply(doc_ref, user_id, vote_type, "댓글을 찾을 수 없습니다.")

    def _apply(self, doc_ref, user_id: str, vote_type, not_found_message: str) -> VotableItem:
        # 잘못된 요청은 문서를 읽기 전에 거른다
        vote_type = VoteType.parse(vote_type)
        if not user_id:
            raise InvalidArgumentError("로그인이 필요합니다.")

        if self.write_mode == WRITE_MODE_SNAPSHOT:
            updated = self._apply_from_snapshot(doc_ref, user_id, vote_type, not_found_message)
        else:
            updated = self._apply_in_transaction(doc_ref, user_id, vote_type, not_found_message)

        logging.info(f"투표 반영 완료 ({vote_type.value}): {user_id} -> {doc_ref.id} "
                     f"(likes={updated.likes}, dislikes={updated.dislikes})")
        return updated

    def _apply_from_snapshot(self, doc_ref, user_id: str, vote_type: VoteType, not_found_message: str) -> VotableItem:
        snapshot = doc_ref.get()
        if not snapshot.exists:
            raise NotFoundError(not_found_message)

        current = VotableItem.from_document(snapshot.id, snapshot.to_dict())
        updated = VoteLedger.apply_vote(current, user_id, vote_type)
        changes = updated.changed_fields(current)
        if changes:
            doc_ref.update(changes)
        return updated

    def _apply_in_transaction(self, doc_ref, user_id: str, vote_type: VoteType, not_found_message: str) -> VotableItem:
        transaction = self.db.transaction()

        @firestore.transactional
        def _vote_in_transaction(transaction):
            snapshot = doc_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError(not_found_message)

            current = VotableItem.from_document(snapshot.id, snapshot.to_dict())
            updated = VoteLedger.apply_vote(current, user_id, vote_type)
            changes = updated.changed_fields(current)
            if changes:
                transaction.update(doc_ref, changes)
            return updated

        return _vote_in_transaction(transaction)


def viewer_vote(data: Dict[str, Any], user_id: Optional[str]) -> Optional[str]:
    """문서 데이터 기준으로 현재 사용자의 투표 상태('like' / 'dislike' / None)를 반환합니다."""
    vote = VotableItem.from_document(data.get('post_id') or data.get('comment_id') or '', data).vote_of(user_id)
    return vote.value if vote else None


def annotate_viewer_votes(posts: List[Dict[str, Any]], user_id: Optional[str]) -> List[Dict[str, Any]]:
    """게시글(및 하위 댓글/답글) 딕셔너리에 my_vote 필드를 채웁니다."""
    def _annotate(item: Dict[str, Any]):
        item['my_vote'] = viewer_vote(item, user_id)
        for child in item.get('comments', []) + item.get('replies', []):
            _annotate(child)

    for post in posts:
        _annotate(post)
    return posts
