"""Test configuration and fixtures."""

import re
from datetime import datetime, timedelta
from uuid import UUID, uuid4

import logfire

from blog.domain.model import Comment, Post
from blog.domain.value import CommentId, CommentStatus, PostId, Slug, UserId

# Keep telemetry local; spans and events still run through logfire
logfire.configure(send_to_logfire=False, console=False)

BASE_TIME = datetime(2025, 6, 1, 12, 0, 0)


def make_slug(title: str, post_id: UUID | str | None = None) -> Slug:
    """Helper function to generate slugs for test posts.

    Args:
        title: Post title to generate slug from
        post_id: Optional post ID for fallback slug generation

    Returns:
        Valid Slug value object
    """
    slug_str = re.sub(r"[^a-z0-9]+", "-", title.lower())
    slug_str = re.sub(r"-+", "-", slug_str).strip("-")[:100]

    if not slug_str and post_id:
        slug_str = f"post-{str(post_id)[:8]}"
    elif not slug_str:
        slug_str = "test-post"

    return Slug(slug_str)


def make_post(title: str = "Test Post", author_id: UserId | None = None) -> Post:
    """Build a post with a unique slug."""
    post_id = PostId(uuid4())
    return Post(
        id=post_id,
        title=title,
        slug=make_slug(f"{title} {str(post_id)[:8]}", post_id),
        author_id=author_id or UserId(uuid4()),
    )


def make_comment(
    post_id: PostId,
    content: str = "Test comment",
    *,
    author_id: UserId | None = None,
    parent_id: CommentId | None = None,
    status: CommentStatus = CommentStatus.PENDING,
    minutes: int = 0,
) -> Comment:
    """Build a comment created ``minutes`` after BASE_TIME."""
    created_at = BASE_TIME + timedelta(minutes=minutes)
    return Comment(
        id=CommentId(uuid4()),
        post_id=post_id,
        author_id=author_id or UserId(uuid4()),
        content=content,
        status=status,
        parent_id=parent_id,
        created_at=created_at,
        updated_at=created_at,
    )
