"""Update comment use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from blog.domain.error import NotAuthorizedError
from blog.domain.model.comment import MAX_CONTENT_LENGTH
from blog.domain.service import CommentService
from blog.domain.service.moderation import can_edit, can_transition
from blog.domain.value import Actor, CommentId, CommentStatus

from .common import CommentItem


class UpdateCommentRequest(BaseModel):
    """Update comment request.

    Fields left as None are not touched.
    """

    comment_id: UUID
    actor: Actor
    content: str | None = Field(
        default=None, min_length=1, max_length=MAX_CONTENT_LENGTH
    )
    status: CommentStatus | None = None


class UpdateCommentResponse(CommentItem):
    """Update comment response."""

    pass


class UpdateCommentUseCase:
    """Use case for partially updating a comment's content and/or status."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: UpdateCommentRequest) -> UpdateCommentResponse:
        """Execute update comment flow.

        Content edits need author or moderator rights; status changes need
        moderator rights.

        Args:
            request: Update comment request

        Returns:
            Updated comment details

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the actor may not make the requested change
        """
        comment_id = CommentId(request.comment_id)
        actor = request.actor

        comment = await self.comment_service.get_comment(comment_id)

        if request.content is not None and not can_edit(actor, comment):
            raise NotAuthorizedError(
                "edit", "comment", str(comment_id), str(actor.user_id)
            )
        if request.status is not None and not can_transition(
            comment.status, request.status, actor.role
        ):
            raise NotAuthorizedError(
                "change status of", "comment", str(comment_id), str(actor.user_id)
            )

        updated = await self.comment_service.update(
            comment_id, content=request.content, status=request.status
        )
        return UpdateCommentResponse(**CommentItem.from_domain(updated).model_dump())
