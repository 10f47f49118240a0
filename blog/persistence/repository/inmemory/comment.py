"""In-memory comment repository for testing."""

from typing import Optional

from blog.domain.model.comment import Comment
from blog.domain.repository.comment import (
    CommentFilter,
    CommentPage,
    CommentRepository,
)
from blog.domain.value import CommentId, CommentStatus, PostId, UserId


def _newest_first(comments: list[Comment]) -> list[Comment]:
    return sorted(comments, key=lambda c: (c.created_at, c.id), reverse=True)


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(comment_id)

    async def find_by_post(
        self,
        post_id: PostId,
        status: Optional[CommentStatus] = None,
    ) -> list[Comment]:
        """Find all comments for a post, newest first."""
        comments = [c for c in self._comments.values() if c.post_id == post_id]

        if status is not None:
            comments = [c for c in comments if c.status == status]

        return _newest_first(comments)

    async def find_by_author(self, author_id: UserId) -> list[Comment]:
        """Find comments by a specific author."""
        return _newest_first(
            [c for c in self._comments.values() if c.author_id == author_id]
        )

    async def count_replies(self, comment_id: CommentId) -> int:
        """Count direct replies to a comment."""
        return sum(1 for c in self._comments.values() if c.parent_id == comment_id)

    async def search(self, filters: CommentFilter) -> CommentPage:
        """Paginated search over all comments."""
        comments = list(self._comments.values())

        if filters.search_term:
            term = filters.search_term.lower()
            comments = [c for c in comments if term in c.content.lower()]
        if filters.author_id:
            comments = [c for c in comments if c.author_id == filters.author_id]
        if filters.post_id:
            comments = [c for c in comments if c.post_id == filters.post_id]
        if filters.status:
            comments = [c for c in comments if c.status == filters.status]
        if filters.root_only:
            comments = [c for c in comments if c.parent_id is None]

        comments = _newest_first(comments)
        items = comments[filters.skip : filters.skip + filters.take]
        return CommentPage.from_slice(items, len(comments), filters)

    async def save(self, comment: Comment) -> Comment:
        """Save or update a comment."""
        self._comments[comment.id] = comment
        return comment

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment."""
        self._comments.pop(comment_id, None)
