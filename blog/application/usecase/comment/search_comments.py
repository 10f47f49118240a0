"""Paginated comment search for moderators."""

from uuid import UUID

from pydantic import BaseModel, Field

from blog.domain.repository import CommentFilter, UserRepository
from blog.domain.repository.comment import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from blog.domain.service import CommentService
from blog.domain.value import Actor, CommentStatus, PostId, UserId

from .common import CommentThreadItem, load_authors, require_privileged, walk


class SearchCommentsRequest(BaseModel):
    """Search comments request."""

    actor: Actor
    search_term: str | None = None
    author_id: UUID | None = None
    post_id: UUID | None = None
    status: CommentStatus | None = None
    root_only: bool = False
    take: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    skip: int = Field(default=0, ge=0)


class SearchCommentsResponse(BaseModel):
    """Search comments response."""

    items: list[CommentThreadItem]
    total_count: int
    has_more: bool


class SearchCommentsUseCase:
    """Use case for the moderator comment listing."""

    def __init__(
        self, comment_service: CommentService, user_repository: UserRepository
    ) -> None:
        self.comment_service = comment_service
        self.user_repository = user_repository

    async def execute(self, request: SearchCommentsRequest) -> SearchCommentsResponse:
        """Execute search comments flow.

        Each hit carries its replies, restricted to the same status filter.

        Raises:
            NotAuthorizedError: If the actor is not a moderator
        """
        require_privileged(request.actor, "search", "comments", "*")

        page, threads = await self.comment_service.find_threads(
            CommentFilter(
                search_term=request.search_term or None,
                author_id=UserId(request.author_id) if request.author_id else None,
                post_id=PostId(request.post_id) if request.post_id else None,
                status=request.status,
                root_only=request.root_only,
                take=request.take,
                skip=request.skip,
            )
        )

        authors = await load_authors(self.user_repository, walk(threads))
        return SearchCommentsResponse(
            items=[CommentThreadItem.from_node(node, authors) for node in threads],
            total_count=page.total_count,
            has_more=page.has_more,
        )
