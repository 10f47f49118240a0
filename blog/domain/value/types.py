"""Domain value objects for the blog.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from blog.domain.value.common import RootValueObject, ValueObject
from blog.domain.value.identifiers import UserId


class CommentStatus(str, Enum):
    """Moderation status of a comment.

    New comments start as PENDING until a moderator acts on them.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Role(str, Enum):
    """User role used for coarse-grained authorization."""

    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"


class Actor(ValueObject):
    """Already-authenticated identity performing an operation."""

    user_id: UserId
    role: Role = Role.USER


class Slug(RootValueObject[str]):
    """URL-safe slug for posts.

    Must be lowercase, alphanumeric with hyphens, 1-100 characters.
    Examples: 'getting-started-with-graphql', 'release-notes-2025'
    """

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate slug format."""
        if not re.match(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", v):
            raise ValueError(
                "Slug must be lowercase alphanumeric with hyphens, "
                "no leading/trailing hyphens or consecutive hyphens"
            )
        if len(v) < 1 or len(v) > 100:
            raise ValueError("Slug must be 1-100 characters")
        return v
