"""Response models shared by the comment use cases."""

from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime

from pydantic import BaseModel

from blog.domain.error import NotAuthorizedError
from blog.domain.model import Comment, User
from blog.domain.repository import UserRepository
from blog.domain.service import CommentThreadNode
from blog.domain.service.moderation import is_privileged
from blog.domain.value import Actor, CommentStatus, UserId

Authors = Mapping[UserId, User]


class CommentAuthor(BaseModel):
    """Public details of a comment's author."""

    user_id: str
    username: str

    @classmethod
    def from_domain(cls, user: User) -> "CommentAuthor":
        return cls(user_id=str(user.id), username=user.username)


class CommentItem(BaseModel):
    """Comment item in responses."""

    comment_id: str
    post_id: str
    author_id: str
    author: CommentAuthor | None = None  # None when the user row is unknown
    content: str
    status: CommentStatus
    parent_id: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(
        cls, comment: Comment, authors: Authors | None = None
    ) -> "CommentItem":
        """Convert a domain comment to a response item.

        Args:
            comment: Domain comment
            authors: Users by ID, as returned by ``load_authors``
        """
        author = (authors or {}).get(comment.author_id)
        return cls(
            comment_id=str(comment.id),
            post_id=str(comment.post_id),
            author_id=str(comment.author_id),
            author=CommentAuthor.from_domain(author) if author else None,
            content=comment.content,
            status=comment.status,
            parent_id=str(comment.parent_id) if comment.parent_id else None,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class CommentThreadItem(CommentItem):
    """Comment with its nested replies.

    Recursive structure mirroring the domain thread node.
    """

    replies: list["CommentThreadItem"]

    @classmethod
    def from_node(
        cls, node: CommentThreadNode, authors: Authors | None = None
    ) -> "CommentThreadItem":
        """Convert a domain thread node, replies included."""
        return cls(
            **CommentItem.from_domain(node.comment, authors).model_dump(),
            replies=[cls.from_node(reply, authors) for reply in node.replies],
        )


def walk(nodes: Iterable[CommentThreadNode]) -> Iterator[Comment]:
    """Yield every comment in the given trees, depth first."""
    for node in nodes:
        yield node.comment
        yield from walk(node.replies)


async def load_authors(
    user_repository: UserRepository, comments: Iterable[Comment]
) -> dict[UserId, User]:
    """Fetch the authors of ``comments`` with one repository call."""
    users = await user_repository.find_by_ids({c.author_id for c in comments})
    return {user.id: user for user in users}


def require_privileged(
    actor: Actor | None, action: str, resource: str, resource_id: str
) -> None:
    """Raise NotAuthorizedError unless the actor may moderate."""
    if actor is None or not is_privileged(actor.role):
        user_id = str(actor.user_id) if actor else "anonymous"
        raise NotAuthorizedError(action, resource, resource_id, user_id)
