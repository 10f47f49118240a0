"""Comment thread assembly.

Turns the flat rows returned by the repository into nested reply trees.
Rows are indexed by id and by parent id; nodes only hold references to
their replies, never to their parent.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from blog.domain.model.comment import Comment
from blog.domain.value import CommentId

MAX_REPLY_DEPTH = 2


@dataclass
class CommentThreadNode:
    """A comment together with its (depth-limited) replies."""

    comment: Comment
    replies: list["CommentThreadNode"] = field(default_factory=list)


def recency_key(comment: Comment) -> tuple:
    """Sort key for newest-first ordering; id breaks created_at ties."""
    return (comment.created_at, comment.id)


class CommentThreadAssembler:
    """Builds reply trees at most ``max_depth`` reply levels deep.

    A root sits at level 0, its replies at level 1, and so on. Replies below
    ``max_depth`` are left out of the tree even if they exist.
    """

    def __init__(self, max_depth: int = MAX_REPLY_DEPTH) -> None:
        self.max_depth = max_depth

    def build(self, comments: Iterable[Comment]) -> list[CommentThreadNode]:
        """Build trees for every root comment in ``comments``.

        Args:
            comments: Flat rows, already filtered by the caller

        Returns:
            Root nodes, newest first, each with nested replies
        """
        by_id, children = self._index(comments)
        roots = [c for c in by_id.values() if c.parent_id is None]
        roots.sort(key=recency_key, reverse=True)
        return [self._subtree(root, children, 0) for root in roots]

    def build_subtree(
        self, comments: Iterable[Comment], root_id: CommentId
    ) -> Optional[CommentThreadNode]:
        """Build the tree rooted at an arbitrary comment.

        Args:
            comments: Flat rows containing the root and its descendants
            root_id: Comment to use as the root of the tree

        Returns:
            The node, or None if ``root_id`` is not among ``comments``
        """
        by_id, children = self._index(comments)
        root = by_id.get(root_id)
        if root is None:
            return None
        return self._subtree(root, children, 0)

    @staticmethod
    def _index(
        comments: Iterable[Comment],
    ) -> tuple[dict[CommentId, Comment], dict[CommentId, list[Comment]]]:
        by_id: dict[CommentId, Comment] = {}
        children: dict[CommentId, list[Comment]] = defaultdict(list)
        for comment in comments:
            by_id[comment.id] = comment
            if comment.parent_id is not None:
                children[comment.parent_id].append(comment)
        return by_id, children

    def _subtree(
        self,
        comment: Comment,
        children: dict[CommentId, list[Comment]],
        level: int,
    ) -> CommentThreadNode:
        if level >= self.max_depth:
            return CommentThreadNode(comment=comment)

        replies = sorted(children.get(comment.id, []), key=recency_key, reverse=True)
        return CommentThreadNode(
            comment=comment,
            replies=[self._subtree(reply, children, level + 1) for reply in replies],
        )
