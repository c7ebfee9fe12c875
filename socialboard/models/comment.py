# socialboard/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from socialboard.utils.datetime_utils import DateTimeUtils


@dataclass
class Comment:
    """
    Firestore 'posts/{post_id}/comments' 서브컬렉션의 문서 구조를 정의하는 데이터클래스.
    생성/삭제만 가능하며 내용은 수정하지 않습니다.
    """
    comment_id: str
    post_id: str
    user_id: str
    author_name: str
    content: str
    parent_comment_id: Optional[str] = None  # None 이면 최상위 댓글
    likes: int = 0
    dislikes: int = 0
    likers: List[str] = field(default_factory=list)
    dislikers: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, comment_id: str, post_id: str, data: Dict[str, Any]) -> "Comment":
        data = DateTimeUtils.from_firestore(data or {})
        return cls(
            comment_id=comment_id,
            post_id=post_id,
            user_id=data.get("user_id", ""),
            author_name=data.get("author_name") or "Anonymous",
            content=data.get("content", ""),
            parent_comment_id=data.get("parent_comment_id"),
            likes=data.get("likes", 0),
            dislikes=data.get("dislikes", 0),
            likers=list(data.get("likers") or []),
            dislikers=list(data.get("dislikers") or []),
            created_at=DateTimeUtils.to_utc(data.get("created_at")),
        )
