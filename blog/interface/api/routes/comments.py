"""Comment routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, HTTPException, Query, status
from pydantic import BaseModel, Field

from blog.application.usecase.comment import (
    CommentThreadItem,
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    GetCommentRequest,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    GetCommentUseCase,
    ListUserCommentsRequest,
    ListUserCommentsResponse,
    ListUserCommentsUseCase,
    ModerateCommentRequest,
    ModerateCommentResponse,
    ModerateCommentUseCase,
    ModerationDecision,
    SearchCommentsRequest,
    SearchCommentsResponse,
    SearchCommentsUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)
from blog.config import CommentSettings
from blog.domain.model.comment import MAX_CONTENT_LENGTH
from blog.domain.repository.comment import MAX_PAGE_SIZE
from blog.domain.service import JWTService
from blog.domain.value import Actor, CommentStatus

router = APIRouter(tags=["comments"], route_class=DishkaRoute)


def _require_actor(
    jwt_service: JWTService, auth_token: str | None, action: str
) -> Actor:
    actor = jwt_service.get_actor_from_token(auth_token)
    if not actor:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )
    return actor


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    parent_id: UUID | None = None  # Parent comment ID for replies


@router.post(
    "/posts/{post_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateCommentResponse:
    """Create a comment on a post or reply to another comment.

    Requires authentication. New comments start out PENDING.

    Args:
        post_id: Post UUID
        request: Comment content and optional parent
        create_comment_use_case: Create comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Created comment details

    Raises:
        HTTPException: If not authenticated
    """
    actor = _require_actor(jwt_service, auth_token, "create comments")

    use_case_request = CreateCommentRequest(
        post_id=post_id,
        author_id=actor.user_id,
        content=request.content,
        parent_id=request.parent_id,
    )
    return await create_comment_use_case.execute(use_case_request)


@router.get("/posts/{post_id}/comments", response_model=GetCommentsResponse)
async def get_comments(
    post_id: UUID,
    get_comments_use_case: FromDishka[GetCommentsUseCase],
) -> GetCommentsResponse:
    """Get the approved comments of a post as threads.

    Root comments come newest first, each with its nested replies.

    Args:
        post_id: Post UUID
        get_comments_use_case: Get comments use case from DI

    Returns:
        Approved comment threads for the post
    """
    request = GetCommentsRequest(post_id=post_id, status=CommentStatus.APPROVED)
    return await get_comments_use_case.execute(request)


@router.get(
    "/posts/{post_id}/comments/moderation", response_model=GetCommentsResponse
)
async def get_comments_for_moderation(
    post_id: UUID,
    get_comments_use_case: FromDishka[GetCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    comment_status: CommentStatus | None = Query(default=None, alias="status"),
    auth_token: str | None = Cookie(default=None),
) -> GetCommentsResponse:
    """Get the comment threads of a post in any status.

    Requires an admin or editor. Without a status every comment is returned.
    """
    actor = _require_actor(jwt_service, auth_token, "moderate comments")

    request = GetCommentsRequest(post_id=post_id, status=comment_status, actor=actor)
    return await get_comments_use_case.execute(request)


@router.get("/comments", response_model=SearchCommentsResponse)
async def search_comments(
    search_comments_use_case: FromDishka[SearchCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    comment_settings: FromDishka[CommentSettings],
    search_term: str | None = Query(default=None),
    author_id: UUID | None = Query(default=None),
    post_id: UUID | None = Query(default=None),
    comment_status: CommentStatus | None = Query(default=None, alias="status"),
    root_only: bool = Query(default=False),
    take: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    skip: int = Query(default=0, ge=0),
    auth_token: str | None = Cookie(default=None),
) -> SearchCommentsResponse:
    """Search comments across posts for moderators.

    Args:
        search_term: Case-insensitive substring of the content
        author_id: Only comments by this user
        post_id: Only comments on this post
        comment_status: Only comments in this status
        root_only: Exclude replies
        take: Page size (defaults to the configured page size)
        skip: Number of matches to skip

    Returns:
        One page of matching comments, newest first
    """
    actor = _require_actor(jwt_service, auth_token, "search comments")

    request = SearchCommentsRequest(
        actor=actor,
        search_term=search_term,
        author_id=author_id,
        post_id=post_id,
        status=comment_status,
        root_only=root_only,
        take=take if take is not None else comment_settings.default_page_size,
        skip=skip,
    )
    return await search_comments_use_case.execute(request)


@router.get("/comments/mine", response_model=ListUserCommentsResponse)
async def list_my_comments(
    list_user_comments_use_case: FromDishka[ListUserCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ListUserCommentsResponse:
    """Get every comment the authenticated user wrote, in any status."""
    actor = _require_actor(jwt_service, auth_token, "list your comments")

    request = ListUserCommentsRequest(user_id=actor.user_id)
    return await list_user_comments_use_case.execute(request)


@router.get("/comments/{comment_id}", response_model=CommentThreadItem)
async def get_comment(
    comment_id: UUID,
    get_comment_use_case: FromDishka[GetCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CommentThreadItem:
    """Get a single comment with its replies, in any status."""
    _require_actor(jwt_service, auth_token, "view comments")

    request = GetCommentRequest(comment_id=comment_id)
    return await get_comment_use_case.execute(request)


class UpdateCommentAPIRequest(BaseModel):
    """API request for updating a comment.

    Omitted fields are left unchanged.
    """

    content: str | None = Field(
        default=None, min_length=1, max_length=MAX_CONTENT_LENGTH
    )
    status: CommentStatus | None = None


@router.patch("/comments/{comment_id}", response_model=UpdateCommentResponse)
async def update_comment(
    comment_id: UUID,
    request: UpdateCommentAPIRequest,
    update_comment_use_case: FromDishka[UpdateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateCommentResponse:
    """Update a comment's content and/or status.

    Authors may edit their own content. Only admins and editors may change
    the status.

    Args:
        comment_id: Comment UUID
        request: Fields to change
        update_comment_use_case: Update comment use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie

    Returns:
        Updated comment details

    Raises:
        HTTPException: If not authenticated
    """
    actor = _require_actor(jwt_service, auth_token, "edit comments")

    use_case_request = UpdateCommentRequest(
        comment_id=comment_id,
        actor=actor,
        content=request.content,
        status=request.status,
    )
    return await update_comment_use_case.execute(use_case_request)


async def _moderate(
    comment_id: UUID,
    decision: ModerationDecision,
    use_case: ModerateCommentUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
) -> ModerateCommentResponse:
    actor = _require_actor(jwt_service, auth_token, "moderate comments")
    request = ModerateCommentRequest(
        comment_id=comment_id, actor=actor, decision=decision
    )
    return await use_case.execute(request)


@router.post("/comments/{comment_id}/approve", response_model=ModerateCommentResponse)
async def approve_comment(
    comment_id: UUID,
    moderate_comment_use_case: FromDishka[ModerateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ModerateCommentResponse:
    """Approve a comment so it shows up on the post."""
    return await _moderate(
        comment_id,
        ModerationDecision.APPROVE,
        moderate_comment_use_case,
        jwt_service,
        auth_token,
    )


@router.post("/comments/{comment_id}/reject", response_model=ModerateCommentResponse)
async def reject_comment(
    comment_id: UUID,
    moderate_comment_use_case: FromDishka[ModerateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> ModerateCommentResponse:
    """Reject a comment, hiding it from the post."""
    return await _moderate(
        comment_id,
        ModerationDecision.REJECT,
        moderate_comment_use_case,
        jwt_service,
        auth_token,
    )


@router.delete("/comments/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeleteCommentResponse:
    """Delete a comment.

    A comment with replies is replaced by a tombstone and rejected; one
    without replies is removed. The response says which happened.
    """
    actor = _require_actor(jwt_service, auth_token, "delete comments")

    request = DeleteCommentRequest(comment_id=comment_id, actor=actor)
    return await delete_comment_use_case.execute(request)
