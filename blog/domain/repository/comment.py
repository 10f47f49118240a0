"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import Field

from blog.domain.model.comment import Comment
from blog.domain.value import CommentId, CommentStatus, PostId, UserId
from blog.domain.value.common import ValueObject

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class CommentFilter(ValueObject):
    """Filters for the paginated comment search."""

    search_term: Optional[str] = None  # Case-insensitive substring of content
    author_id: Optional[UserId] = None
    post_id: Optional[PostId] = None
    status: Optional[CommentStatus] = None
    root_only: bool = False
    take: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    skip: int = Field(default=0, ge=0)


class CommentPage(ValueObject):
    """One page of search results."""

    items: list[Comment]
    total_count: int
    has_more: bool

    @classmethod
    def from_slice(
        cls, items: list[Comment], total_count: int, filters: CommentFilter
    ) -> "CommentPage":
        """Build a page, deriving has_more from the filter window."""
        return cls(
            items=items,
            total_count=total_count,
            has_more=filters.skip + filters.take < total_count,
        )


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the infrastructure layer.

    Every listing is ordered newest first, with ties on ``created_at``
    broken by ``id`` (descending) so results are deterministic.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID.

        Args:
            comment_id: The comment's unique identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_post(
        self,
        post_id: PostId,
        status: Optional[CommentStatus] = None,
    ) -> List[Comment]:
        """Find all comments for a post, at every depth.

        Args:
            post_id: The post ID
            status: Only return comments in this status (None for all)

        Returns:
            Flat list of comments, newest first
        """
        pass

    @abstractmethod
    async def find_by_author(self, author_id: UserId) -> List[Comment]:
        """Find comments by a specific author.

        Args:
            author_id: The author's user ID

        Returns:
            List of comments by the author, newest first
        """
        pass

    @abstractmethod
    async def count_replies(self, comment_id: CommentId) -> int:
        """Count direct replies to a comment, regardless of status.

        Args:
            comment_id: The parent comment ID

        Returns:
            Number of direct replies
        """
        pass

    @abstractmethod
    async def search(self, filters: CommentFilter) -> CommentPage:
        """Paginated search over all comments.

        Args:
            filters: Search filters and pagination window

        Returns:
            The requested page together with the total match count
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment (hard delete).

        Args:
            comment_id: The comment ID to delete
        """
        pass
