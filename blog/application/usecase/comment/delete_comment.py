"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from blog.domain.error import NotAuthorizedError
from blog.domain.service import CommentService, DeletionMode
from blog.domain.service.moderation import can_delete
from blog.domain.value import Actor, CommentId

from .common import CommentItem


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: UUID
    actor: Actor


class DeleteCommentResponse(BaseModel):
    """Delete comment response.

    ``comment`` is the tombstone for soft deletes and the removed row
    for hard deletes.
    """

    comment: CommentItem
    mode: DeletionMode


class DeleteCommentUseCase:
    """Use case for deleting (or tombstoning) a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the actor is neither author nor moderator
        """
        comment_id = CommentId(request.comment_id)
        comment = await self.comment_service.get_comment(comment_id)

        if not can_delete(request.actor, comment):
            raise NotAuthorizedError(
                "delete", "comment", str(comment_id), str(request.actor.user_id)
            )

        result = await self.comment_service.delete(comment_id)
        return DeleteCommentResponse(
            comment=CommentItem.from_domain(result.comment), mode=result.mode
        )
