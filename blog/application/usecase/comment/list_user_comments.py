"""List the comments written by a user."""

from uuid import UUID

from pydantic import BaseModel

from blog.domain.model import Post
from blog.domain.repository import PostRepository, UserRepository
from blog.domain.service import CommentService
from blog.domain.value import PostId, UserId

from .common import CommentItem


class UserCommentItem(CommentItem):
    """Comment with the context of the post it was written on."""

    post_title: str | None
    post_slug: str | None


class ListUserCommentsRequest(BaseModel):
    """List user comments request."""

    user_id: UUID


class ListUserCommentsResponse(BaseModel):
    """List user comments response."""

    user_id: str
    username: str | None  # None when the user record is unknown here
    comments: list[UserCommentItem]
    total: int


class ListUserCommentsUseCase:
    """Use case for listing a user's own comments, newest first."""

    def __init__(
        self,
        comment_service: CommentService,
        post_repository: PostRepository,
        user_repository: UserRepository,
    ) -> None:
        """Initialize list user comments use case.

        Args:
            comment_service: Comment domain service
            post_repository: Post repository for title/slug context
            user_repository: User repository for the author name
        """
        self.comment_service = comment_service
        self.post_repository = post_repository
        self.user_repository = user_repository

    async def execute(
        self, request: ListUserCommentsRequest
    ) -> ListUserCommentsResponse:
        """Execute list user comments flow.

        Each distinct post is looked up once.
        """
        user_id = UserId(request.user_id)
        user = await self.user_repository.find_by_id(user_id)
        comments = await self.comment_service.list_for_user(user_id)
        authors = {user.id: user} if user else {}

        posts: dict[PostId, Post | None] = {}
        for comment in comments:
            if comment.post_id not in posts:
                posts[comment.post_id] = await self.post_repository.find_by_id(
                    comment.post_id
                )

        items = []
        for comment in comments:
            post = posts[comment.post_id]
            items.append(
                UserCommentItem(
                    **CommentItem.from_domain(comment, authors).model_dump(),
                    post_title=post.title if post else None,
                    post_slug=post.slug.root if post else None,
                )
            )

        return ListUserCommentsResponse(
            user_id=str(user_id),
            username=user.username if user else None,
            comments=items,
            total=len(items),
        )
