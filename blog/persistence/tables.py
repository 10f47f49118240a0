"""SQLAlchemy table definitions for the blog.

These table definitions are used with SQLAlchemy Core queries.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()


def _timestamps() -> tuple[Column, Column]:
    """created_at/updated_at pair shared by every table."""
    return (
        Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=text("NOW()"),
        ),
        Column(
            "updated_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=text("NOW()"),
        ),
    )


def _id() -> Column:
    return Column(
        "id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")
    )


# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    _id(),
    Column("username", String(50), nullable=False, unique=True),
    Column("email", String(255), nullable=True),
    Column(
        "role",
        Enum("admin", "editor", "user", name="user_role", create_type=False),
        nullable=False,
        server_default="user",
    ),
    *_timestamps(),
)

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    _id(),
    Column("title", String(300), nullable=False),
    Column("slug", String(100), nullable=False, unique=True),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    *_timestamps(),
)

Index("idx_posts_author_id", posts_table.c.author_id)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
# parent_id uses RESTRICT: comments with replies are tombstoned, never removed
comments_table = Table(
    "comments",
    metadata,
    _id(),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="RESTRICT"), nullable=True
    ),
    Column(
        "author_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    Column("content", Text, nullable=False),
    Column(
        "status",
        Enum(
            "pending", "approved", "rejected", name="comment_status", create_type=False
        ),
        nullable=False,
        server_default="pending",
    ),
    *_timestamps(),
)

Index("idx_comments_post_id", comments_table.c.post_id)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_author_id", comments_table.c.author_id)
Index("idx_comments_status", comments_table.c.status)
Index("idx_comments_created_at", comments_table.c.created_at.desc())
