"""Get comment threads for a post."""

from uuid import UUID

from pydantic import BaseModel

from blog.domain.repository import UserRepository
from blog.domain.service import CommentService
from blog.domain.value import Actor, CommentStatus, PostId

from .common import CommentThreadItem, load_authors, require_privileged, walk


class GetCommentsRequest(BaseModel):
    """Get comments request.

    Public readers only see APPROVED comments. Any other status filter,
    or no filter at all, is a moderation view.
    """

    post_id: UUID
    status: CommentStatus | None = CommentStatus.APPROVED
    actor: Actor | None = None


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    post_id: str
    comments: list[CommentThreadItem]
    total: int


class GetCommentsUseCase:
    """Use case for getting the threaded comments of a post."""

    def __init__(
        self, comment_service: CommentService, user_repository: UserRepository
    ) -> None:
        self.comment_service = comment_service
        self.user_repository = user_repository

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Args:
            request: Post ID, status filter and the requesting actor

        Returns:
            Root comments, newest first, with nested replies

        Raises:
            NotAuthorizedError: If a moderation view is requested without
                moderation rights
            NotFoundError: If the post does not exist
        """
        if request.status != CommentStatus.APPROVED:
            require_privileged(
                request.actor, "moderate comments on", "post", str(request.post_id)
            )

        threads = await self.comment_service.list_for_post(
            post_id=PostId(request.post_id), status=request.status
        )

        def count_nodes(item: CommentThreadItem) -> int:
            return 1 + sum(count_nodes(reply) for reply in item.replies)

        authors = await load_authors(self.user_repository, walk(threads))
        items = [CommentThreadItem.from_node(node, authors) for node in threads]
        return GetCommentsResponse(
            post_id=str(request.post_id),
            comments=items,
            total=sum(count_nodes(item) for item in items),
        )
