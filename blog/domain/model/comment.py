"""Comment entity.

Comments are stored flat: a reply only points at its parent through
``parent_id``. Thread views are rebuilt on read by the thread assembler.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from blog.domain.model.common import DomainModel
from blog.domain.value import CommentId, CommentStatus, PostId, UserId

MAX_CONTENT_LENGTH = 1000


class Comment(DomainModel):
    """Comment entity.

    Represents a comment on a post or a reply to another comment.

    - parent_id: Direct parent comment (None for root comments). The parent
      always belongs to the same post.
    - status: Moderation state, PENDING on creation.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    status: CommentStatus = CommentStatus.PENDING
    parent_id: Optional[CommentId] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_root(self) -> bool:
        """Whether the comment is attached directly to its post."""
        return self.parent_id is None
