"""Repository interfaces for the blog domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from blog.domain.repository.comment import (
    CommentFilter,
    CommentPage,
    CommentRepository,
)
from blog.domain.repository.post import PostRepository
from blog.domain.repository.user import UserRepository

__all__ = [
    "CommentFilter",
    "CommentPage",
    "CommentRepository",
    "PostRepository",
    "UserRepository",
]
