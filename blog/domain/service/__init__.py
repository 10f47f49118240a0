"""Domain services."""

from .base import Service
from .comment_service import CommentService, DeletionResult
from .jwt_service import JWTService
from .moderation import DeletionMode
from .thread import CommentThreadAssembler, CommentThreadNode

__all__ = [
    "CommentService",
    "CommentThreadAssembler",
    "CommentThreadNode",
    "DeletionMode",
    "DeletionResult",
    "JWTService",
    "Service",
]
