"""Get a single comment with its replies."""

from uuid import UUID

from pydantic import BaseModel

from blog.domain.repository import UserRepository
from blog.domain.service import CommentService
from blog.domain.value import CommentId

from .common import CommentThreadItem, load_authors, walk


class GetCommentRequest(BaseModel):
    """Get comment request."""

    comment_id: UUID


class GetCommentUseCase:
    """Use case for fetching one comment and its reply subtree."""

    def __init__(
        self, comment_service: CommentService, user_repository: UserRepository
    ) -> None:
        self.comment_service = comment_service
        self.user_repository = user_repository

    async def execute(self, request: GetCommentRequest) -> CommentThreadItem:
        """Execute get comment flow.

        Raises:
            NotFoundError: If the comment does not exist
        """
        node = await self.comment_service.get_comment_thread(
            CommentId(request.comment_id)
        )
        authors = await load_authors(self.user_repository, walk([node]))
        return CommentThreadItem.from_node(node, authors)
