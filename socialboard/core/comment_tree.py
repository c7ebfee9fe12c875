# socialboard/core/comment_tree.py
"""
평면적인 댓글 목록을 화면 표시용 트리(포레스트)로 재구성합니다.

- parent_comment_id 가 없는 댓글이 최상위(root) 댓글입니다.
- 각 root 에는 그 root 를 직접 가리키는 답글만 붙습니다. (1단계 중첩)
- 부모가 root 목록에 없는 답글(고아 답글, 답글의 답글)은 결과에서 제외됩니다.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List

from socialboard.models.comment import Comment


@dataclass
class CommentNode:
    """댓글 한 개와 그 직접 답글 목록. 저장하지 않고 읽을 때마다 새로 만듭니다."""
    comment: Comment
    replies: List["CommentNode"] = field(default_factory=list)

    @property
    def comment_id(self) -> str:
        return self.comment.comment_id

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.comment)
        data["replies"] = [reply.to_dict() for reply in self.replies]
        return data


class CommentTreeBuilder:

    @staticmethod
    def build(records: Iterable[Comment]) -> List[CommentNode]:
        """
        댓글 목록으로 포레스트를 만듭니다. 입력 순서(보통 작성 시간 순)를 그대로 유지합니다.
        빈 입력이면 빈 리스트를 반환합니다.
        """
        records = list(records)
        roots = [CommentNode(comment=record) for record in records if not record.parent_comment_id]
        replies = [record for record in records if record.parent_comment_id]

        roots_by_id = {node.comment_id: node for node in roots}
        for record in replies:
            parent = roots_by_id.get(record.parent_comment_id)
            if parent is not None:
                parent.replies.append(CommentNode(comment=record))
        return roots
