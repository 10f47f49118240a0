"""Approve / reject comment use case."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from blog.domain.error import NotAuthorizedError
from blog.domain.service import CommentService
from blog.domain.service.moderation import can_transition
from blog.domain.value import Actor, CommentId, CommentStatus

from .common import CommentItem


class ModerationDecision(str, Enum):
    """Moderation action requested by a moderator."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def status(self) -> CommentStatus:
        """Status the decision sets."""
        if self is ModerationDecision.APPROVE:
            return CommentStatus.APPROVED
        return CommentStatus.REJECTED


class ModerateCommentRequest(BaseModel):
    """Moderate comment request."""

    comment_id: UUID
    actor: Actor
    decision: ModerationDecision


class ModerateCommentResponse(CommentItem):
    """Moderate comment response."""

    pass


class ModerateCommentUseCase:
    """Use case for approving or rejecting a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(
        self, request: ModerateCommentRequest
    ) -> ModerateCommentResponse:
        """Execute moderation flow.

        Repeating a decision is allowed and leaves the comment unchanged.

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the actor is not a moderator
        """
        comment_id = CommentId(request.comment_id)
        comment = await self.comment_service.get_comment(comment_id)

        if not can_transition(
            comment.status, request.decision.status, request.actor.role
        ):
            raise NotAuthorizedError(
                request.decision.value,
                "comment",
                str(comment_id),
                str(request.actor.user_id),
            )

        if request.decision is ModerationDecision.APPROVE:
            moderated = await self.comment_service.approve(comment_id)
        else:
            moderated = await self.comment_service.reject(comment_id)

        return ModerateCommentResponse(
            **CommentItem.from_domain(moderated).model_dump()
        )
