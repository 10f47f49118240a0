"""User aggregate root."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from blog.domain.model.common import DomainModel
from blog.domain.value import Role, UserId


class User(DomainModel):
    """User account.

    The role decides whether the user may moderate other people's comments.
    """

    id: UserId
    username: str = Field(min_length=1, max_length=50)
    email: Optional[str] = None
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
