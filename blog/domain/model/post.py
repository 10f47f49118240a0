"""Post aggregate root.

Only the fields the comment subsystem reads are modelled here.
"""

from datetime import datetime

from pydantic import Field

from blog.domain.model.common import DomainModel
from blog.domain.value import PostId, Slug, UserId


class Post(DomainModel):
    """Blog post that comments attach to."""

    id: PostId
    title: str = Field(min_length=1, max_length=300)
    slug: Slug
    author_id: UserId
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
