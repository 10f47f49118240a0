"""Create comment use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from blog.domain.model.comment import MAX_CONTENT_LENGTH
from blog.domain.service import CommentService
from blog.domain.value import CommentId, PostId, UserId

from .common import CommentItem


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    post_id: UUID
    author_id: UUID  # User ID from authenticated user
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    parent_id: UUID | None = None  # Parent comment ID for replies


class CreateCommentResponse(CommentItem):
    """Create comment response."""

    pass


class CreateCommentUseCase:
    """Use case for creating a comment on a post or replying to another comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        The service verifies the post exists and, for replies, that the
        parent exists on the same post.

        Args:
            request: Create comment request

        Returns:
            Created comment, in PENDING status

        Raises:
            NotFoundError: If post or parent comment not found
            InvalidRelationError: If parent comment is on another post
        """
        comment = await self.comment_service.create_comment(
            post_id=PostId(request.post_id),
            author_id=UserId(request.author_id),
            content=request.content,
            parent_id=CommentId(request.parent_id) if request.parent_id else None,
        )
        return CreateCommentResponse(**CommentItem.from_domain(comment).model_dump())
