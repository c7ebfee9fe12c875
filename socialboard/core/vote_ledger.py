# socialboard/core/vote_ledger.py
"""
게시글/댓글의 좋아요·싫어요 집계를 계산하는 순수 로직.

Firestore 등 저장소와 무관하게 동작하며, 저장은 VoteService 가 담당합니다.
- 한 사용자는 likers / dislikers 중 최대 한 곳에만 존재합니다.
- likes / dislikes 는 각 목록의 길이와 같아야 합니다.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from socialboard.core.errors import InvalidArgumentError


class VoteType(Enum):
    """투표 유형"""
    LIKE = "like"
    DISLIKE = "dislike"

    @classmethod
    def parse(cls, value: Union["VoteType", str, None]) -> "VoteType":
        """'like' / 'dislike' (또는 'up' / 'down') 문자열을 VoteType 으로 변환합니다."""
        if isinstance(value, VoteType):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            normalized = _VOTE_ALIASES.get(normalized, normalized)
            for member in cls:
                if member.value == normalized:
                    return member
        raise InvalidArgumentError(f"지원하지 않는 투표 유형입니다: {value!r}")


_VOTE_ALIASES = {"up": "like", "down": "dislike"}


@dataclass
class VotableItem:
    """투표 대상(게시글 또는 댓글)의 투표 관련 필드."""
    item_id: str
    likers: List[str] = field(default_factory=list)
    dislikers: List[str] = field(default_factory=list)
    likes: int = 0
    dislikes: int = 0

    @classmethod
    def from_document(cls, item_id: str, data: Optional[Dict[str, Any]]) -> "VotableItem":
        """Firestore 문서 데이터에서 투표 필드만 추출합니다. 누락된 필드는 0 / 빈 목록으로 간주합니다."""
        data = data or {}
        return cls(
            item_id=item_id,
            likers=list(data.get("likers") or []),
            dislikers=list(data.get("dislikers") or []),
            likes=int(data.get("likes") or 0),
            dislikes=int(data.get("dislikes") or 0),
        )

    def vote_of(self, user_id: Optional[str]) -> Optional[VoteType]:
        if not user_id:
            return None
        if user_id in self.likers:
            return VoteType.LIKE
        if user_id in self.dislikers:
            return VoteType.DISLIKE
        return None

    def to_fields(self) -> Dict[str, Any]:
        return {
            "likers": list(self.likers),
            "dislikers": list(self.dislikers),
            "likes": self.likes,
            "dislikes": self.dislikes,
        }

    def changed_fields(self, previous: "VotableItem") -> Dict[str, Any]:
        """previous 와 비교하여 달라진 필드만 반환합니다. (부분 업데이트용)"""
        before = previous.to_fields()
        return {key: value for key, value in self.to_fields().items() if before[key] != value}


class VoteLedger:
    """투표 상태 전이를 계산하는 클래스"""

    @staticmethod
    def apply_vote(item: VotableItem, user_id: str, vote_type: Union[VoteType, str]) -> VotableItem:
        """
        사용자의 투표 의도를 반영한 새 VotableItem 을 반환합니다. (입력 객체는 변경하지 않음)

        - 이미 같은 유형으로 투표한 경우: 해당 목록에서 제거하고 카운트 1 감소 (투표 취소)
        - 그 외: 해당 목록에 추가하고 카운트 1 증가.
          반대 유형 목록에 있었다면 그 목록에서 제거하고 반대 카운트 1 감소 (투표 변경)

        :raises InvalidArgumentError: item / user_id / vote_type 이 올바르지 않은 경우
        """
        if not isinstance(item, VotableItem):
            raise InvalidArgumentError("투표 대상이 올바르지 않습니다.")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidArgumentError("사용자 ID가 필요합니다.")
        vote_type = VoteType.parse(vote_type)

        likers, dislikers = list(item.likers), list(item.dislikers)
        likes, dislikes = item.likes, item.dislikes

        if vote_type is VoteType.LIKE:
            if user_id in likers:
                likers = [uid for uid in likers if uid != user_id]
                likes = max(0, likes - 1)
            else:
                likers.append(user_id)
                likes += 1
                if user_id in dislikers:
                    dislikers = [uid for uid in dislikers if uid != user_id]
                    dislikes = max(0, dislikes - 1)
        else:
            if user_id in dislikers:
                dislikers = [uid for uid in dislikers if uid != user_id]
                dislikes = max(0, dislikes - 1)
            else:
                dislikers.append(user_id)
                dislikes += 1
                if user_id in likers:
                    likers = [uid for uid in likers if uid != user_id]
                    likes = max(0, likes - 1)

        return replace(item, likers=likers, dislikers=dislikers, likes=likes, dislikes=dislikes)


def apply_vote(item: VotableItem, user_id: str, vote_type: Union[VoteType, str]) -> VotableItem:
    """VoteLedger.apply_vote 단축 함수"""
    return VoteLedger.apply_vote(item, user_id, vote_type)
