"""Comment use cases."""

from .common import CommentAuthor, CommentItem, CommentThreadItem
from .create_comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
)
from .delete_comment import (
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from .get_comment import GetCommentRequest, GetCommentUseCase
from .get_comments import GetCommentsRequest, GetCommentsResponse, GetCommentsUseCase
from .list_user_comments import (
    ListUserCommentsRequest,
    ListUserCommentsResponse,
    ListUserCommentsUseCase,
    UserCommentItem,
)
from .moderate_comment import (
    ModerateCommentRequest,
    ModerateCommentResponse,
    ModerateCommentUseCase,
    ModerationDecision,
)
from .search_comments import (
    SearchCommentsRequest,
    SearchCommentsResponse,
    SearchCommentsUseCase,
)
from .update_comment import (
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
)

__all__ = [
    "CommentAuthor",
    "CommentItem",
    "CommentThreadItem",
    "CreateCommentRequest",
    "CreateCommentResponse",
    "CreateCommentUseCase",
    "DeleteCommentRequest",
    "DeleteCommentResponse",
    "DeleteCommentUseCase",
    "GetCommentRequest",
    "GetCommentUseCase",
    "GetCommentsRequest",
    "GetCommentsResponse",
    "GetCommentsUseCase",
    "ListUserCommentsRequest",
    "ListUserCommentsResponse",
    "ListUserCommentsUseCase",
    "ModerateCommentRequest",
    "ModerateCommentResponse",
    "ModerateCommentUseCase",
    "ModerationDecision",
    "SearchCommentsRequest",
    "SearchCommentsResponse",
    "SearchCommentsUseCase",
    "UpdateCommentRequest",
    "UpdateCommentResponse",
    "UpdateCommentUseCase",
    "UserCommentItem",
]
