"""Comment moderation rules.

Pure functions over statuses, roles and comments. Nothing here touches
storage, so every rule can be checked without a database.

Status changes are an unconditional overwrite for privileged actors: any
status may be set from any status, including the current one.
"""

from datetime import datetime
from enum import Enum

from blog.domain.model.comment import Comment
from blog.domain.value import Actor, CommentStatus, Role

TOMBSTONE_TEXT = "[Comment deleted]"

PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.EDITOR})


class DeletionMode(str, Enum):
    """How a comment is removed."""

    HARD = "hard"  # Row removed from storage
    SOFT = "soft"  # Row kept as a tombstone so replies stay attached


def is_privileged(role: Role) -> bool:
    """Whether the role grants moderation rights."""
    return role in PRIVILEGED_ROLES


def can_transition(
    current: CommentStatus, requested: CommentStatus, role: Role
) -> bool:
    """Whether ``role`` may move a comment from ``current`` to ``requested``.

    Args:
        current: Status the comment has now
        requested: Status being asked for
        role: Role of the acting user

    Returns:
        True for privileged roles whatever the statuses, False otherwise
    """
    return is_privileged(role)


def can_edit(actor: Actor, comment: Comment) -> bool:
    """Authors may edit their own content; moderators may edit anyone's."""
    return comment.author_id == actor.user_id or is_privileged(actor.role)


def can_delete(actor: Actor, comment: Comment) -> bool:
    """Authors may delete their own comments; moderators may delete anyone's."""
    return comment.author_id == actor.user_id or is_privileged(actor.role)


def deletion_mode(reply_count: int) -> DeletionMode:
    """Pick hard or soft delete from the number of direct replies."""
    if reply_count > 0:
        return DeletionMode.SOFT
    return DeletionMode.HARD


def tombstone(comment: Comment) -> Comment:
    """Return the soft-deleted form of a comment.

    Content is replaced and the status forced to REJECTED; identity,
    parent and post are untouched so replies keep pointing at it.
    """
    return comment.model_copy(
        update={
            "content": TOMBSTONE_TEXT,
            "status": CommentStatus.REJECTED,
            "updated_at": datetime.now(),
        }
    )
