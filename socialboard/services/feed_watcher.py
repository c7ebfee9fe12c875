# socialboard/services/feed_watcher.py
"""
Firestore 실시간 구독(on_snapshot)으로 피드를 메모리에 유지하는 서비스.

- posts 컬렉션 구독 1개 + 게시글마다 comments 서브컬렉션 구독 1개
- 게시글 스냅샷이 올 때마다 최신순으로 다시 정렬합니다.
- 사라진 게시글의 댓글 구독은 즉시 해제합니다.
- 콜백은 Firestore SDK 스레드에서 호출되므로 상태는 잠금으로 보호합니다.
"""

import copy
import logging
import threading
from dataclasses import asdict
from typing import Any, Dict, List

from socialboard.api.comments.services import CommentService
from socialboard.api.posts.services import PostService
from socialboard.core.comment_tree import CommentTreeBuilder
from socialboard.models.comment import Comment
from socialboard.models.post import Post
from socialboard.services.firestore_service import POSTS, collection_ref, comments_ref


class FeedWatcher:
    def __init__(self, db, app_id: str = 'default-app-id'):
        self.db = db
        self.app_id = app_id
        self._lock = threading.RLock()
        self._running = False
        self._posts_watch = None
        self._comment_watches: Dict[str, Any] = {}
        self._posts: List[Post] = []
        self._forests: Dict[str, List[Dict[str, Any]]] = {}

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
            self._posts_watch = collection_ref(self.db, self.app_id, POSTS).on_snapshot(self._on_posts_snapshot)
        logging.info(f"피드 실시간 구독 시작 (app_id: {self.app_id})")

    def stop(self) -> None:
        """모든 구독을 해제하고 메모리 상태를 비웁니다."""
        with self._lock:
            self._running = False
            watches = list(self._comment_watches.values())
            if self._posts_watch is not None:
                watches.append(self._posts_watch)
            self._posts_watch = None
            self._comment_watches.clear()
            self._posts = []
            self._forests.clear()
        for watch in watches:
            if watch is not None:
                watch.unsubscribe()
        logging.info(f"피드 실시간 구독 종료 (해제된 구독 수: {len(watches)})")

    def snapshot(self) -> List[Dict[str, Any]]:
        """현재 피드(최신순 게시글 + 각 게시글의 댓글 트리)의 복사본을 반환합니다."""
        with self._lock:
            feed = []
            for post in self._posts:
                post_data = asdict(post)
                post_data['comments'] = copy.deepcopy(self._forests.get(post.post_id, []))
                feed.append(post_data)
            return feed

    def watched_post_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._comment_watches)

    def _on_posts_snapshot(self, docs, changes, read_time) -> None:
        posts = PostService.sort_newest_first(Post.from_dict(doc.id, doc.to_dict()) for doc in docs)
        current_ids = {post.post_id for post in posts}

        with self._lock:
            if not self._running:
                return
            removed = [pid for pid in self._comment_watches if pid not in current_ids]
            stale_watches = [self._comment_watches.pop(pid) for pid in removed]
            for pid in removed:
                self._forests.pop(pid, None)
            self._posts = posts
            added = [post.post_id for post in posts if post.post_id not in self._comment_watches]

            for post_id in added:
                # 최초 스냅샷이 on_snapshot 반환 전에 도착할 수 있으므로 먼저 등록
                self._comment_watches[post_id] = None
                self._comment_watches[post_id] = comments_ref(self.db, self.app_id, post_id).on_snapshot(
                    lambda docs, changes, read_time, post_id=post_id: self._on_comments_snapshot(post_id, docs)
                )

        for watch in stale_watches:
            if watch is not None:
                watch.unsubscribe()
        if added or removed:
            logging.info(f"댓글 구독 갱신: +{len(added)} / -{len(removed)}")

    def _on_comments_snapshot(self, post_id: str, docs) -> None:
        records = CommentService.sort_oldest_first(Comment.from_dict(doc.id, post_id, doc.to_dict()) for doc in docs)
        forest = [node.to_dict() for node in CommentTreeBuilder.build(records)]
        with self._lock:
            # 이미 구독이 해제된 게시글의 늦은 알림은 무시
            if not self._running or post_id not in self._comment_watches:
                return
            self._forests[post_id] = forest

