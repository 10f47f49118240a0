"""Unit tests for row <-> domain mappers."""

from datetime import datetime
from uuid import uuid4

from blog.domain.value import CommentStatus, PostId
from blog.persistence.mappers import (
    comment_to_dict,
    post_to_dict,
    row_to_comment,
    row_to_post,
)
from tests.conftest import make_comment, make_post


class TestCommentMapping:
    def test_comment_dict_stores_status_as_plain_string(self):
        comment = make_comment(PostId(uuid4()), status=CommentStatus.APPROVED)

        data = comment_to_dict(comment)

        assert data["status"] == "approved"
        assert data["parent_id"] is None
        assert row_to_comment(data) == comment

    def test_row_with_string_ids_is_converted(self):
        """asyncpg returns UUIDs, but string ids from raw SQL are accepted too."""
        post_id = uuid4()
        parent_id = uuid4()
        now = datetime.now()
        row = {
            "id": str(uuid4()),
            "post_id": str(post_id),
            "author_id": str(uuid4()),
            "content": "Reply",
            "status": "pending",
            "parent_id": str(parent_id),
            "created_at": now,
            "updated_at": now,
        }

        comment = row_to_comment(row)

        assert comment.post_id == post_id
        assert comment.parent_id == parent_id
        assert comment.status == CommentStatus.PENDING


class TestPostMapping:
    def test_post_dict_flattens_slug(self):
        post = make_post("Hello World")

        data = post_to_dict(post)

        assert isinstance(data["slug"], str)
        assert row_to_post(data) == post
