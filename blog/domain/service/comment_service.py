"""Comment domain service."""

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

import logfire

from blog.domain.error import InvalidRelationError, NotFoundError, ValidationError
from blog.domain.model.comment import MAX_CONTENT_LENGTH, Comment
from blog.domain.repository import (
    CommentFilter,
    CommentPage,
    CommentRepository,
    PostRepository,
)
from blog.domain.value import CommentId, CommentStatus, PostId, UserId

from .base import Service
from .moderation import DeletionMode, deletion_mode, tombstone
from .thread import CommentThreadAssembler, CommentThreadNode


@dataclass
class DeletionResult:
    """Outcome of a delete: the comment as it was removed or tombstoned."""

    comment: Comment
    mode: DeletionMode


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_repository: PostRepository,
        thread_assembler: CommentThreadAssembler | None = None,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_repository: Post repository, used for referential checks
            thread_assembler: Builds reply trees (defaults to two reply levels)
        """
        self.comment_repository = comment_repository
        self.post_repository = post_repository
        self.thread_assembler = thread_assembler or CommentThreadAssembler()

    async def create_comment(
        self,
        post_id: PostId,
        author_id: UserId,
        content: str,
        parent_id: CommentId | None = None,
    ) -> Comment:
        """Create a comment on a post or reply to another comment.

        Args:
            post_id: Post ID
            author_id: Author user ID
            content: Comment text
            parent_id: Parent comment ID for replies (None for root comments)

        Returns:
            Created comment, always PENDING

        Raises:
            ValidationError: If content is empty or too long
            NotFoundError: If the post or the parent comment does not exist
            InvalidRelationError: If the parent belongs to another post
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(post_id),
            author_id=str(author_id),
            parent_id=str(parent_id) if parent_id else None,
        ):
            self._validate_content(content)
            await self._require_post(post_id)

            if parent_id:
                parent = await self.comment_repository.find_by_id(parent_id)
                if not parent:
                    logfire.warn(
                        "Parent comment not found",
                        parent_id=str(parent_id),
                        post_id=str(post_id),
                    )
                    raise NotFoundError("Comment", str(parent_id))
                if parent.post_id != post_id:
                    logfire.warn(
                        "Parent comment does not belong to post",
                        parent_id=str(parent_id),
                        parent_post_id=str(parent.post_id),
                        target_post_id=str(post_id),
                    )
                    raise InvalidRelationError(str(parent_id), str(post_id))

            now = datetime.now()
            comment = Comment(
                id=CommentId(uuid4()),
                post_id=post_id,
                author_id=author_id,
                content=content,
                status=CommentStatus.PENDING,
                parent_id=parent_id,
                created_at=now,
                updated_at=now,
            )

            saved = await self.comment_repository.save(comment)
            logfire.info(
                "Comment created",
                comment_id=str(saved.id),
                post_id=str(post_id),
                is_reply=parent_id is not None,
            )
            return saved

    async def get_comment(self, comment_id: CommentId) -> Comment:
        """Get a comment by ID.

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span("comment_service.get_comment", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found", comment_id=str(comment_id))
                raise NotFoundError("Comment", str(comment_id))
            return comment

    async def get_comment_thread(self, comment_id: CommentId) -> CommentThreadNode:
        """Get a comment together with its reply subtree.

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span(
            "comment_service.get_comment_thread", comment_id=str(comment_id)
        ):
            comment = await self.get_comment(comment_id)
            siblings = await self.comment_repository.find_by_post(comment.post_id)
            node = self.thread_assembler.build_subtree(siblings, comment.id)
            # The row can vanish between the two reads
            if node is None:
                raise NotFoundError("Comment", str(comment_id))
            return node

    async def list_for_post(
        self, post_id: PostId, status: CommentStatus | None = None
    ) -> list[CommentThreadNode]:
        """Get the root comments of a post with their nested replies.

        Args:
            post_id: Post ID
            status: Only include comments in this status, at every level

        Returns:
            Root comment trees, newest first

        Raises:
            NotFoundError: If the post does not exist
        """
        with logfire.span(
            "comment_service.list_for_post",
            post_id=str(post_id),
            status=status.value if status else None,
        ):
            await self._require_post(post_id)
            comments = await self.comment_repository.find_by_post(
                post_id=post_id, status=status
            )
            threads = self.thread_assembler.build(comments)
            logfire.info(
                "Comment threads built",
                post_id=str(post_id),
                comment_count=len(comments),
                root_count=len(threads),
            )
            return threads

    async def list_for_user(self, author_id: UserId) -> list[Comment]:
        """Get every comment written by a user, newest first."""
        with logfire.span(
            "comment_service.list_for_user", author_id=str(author_id)
        ):
            comments = await self.comment_repository.find_by_author(author_id)
            logfire.info(
                "Comments retrieved for user",
                author_id=str(author_id),
                count=len(comments),
            )
            return comments

    async def find(self, filters: CommentFilter) -> CommentPage:
        """Paginated search over comments.

        Args:
            filters: Search filters and pagination window

        Returns:
            Page of comments with total count and has_more flag
        """
        with logfire.span(
            "comment_service.find",
            search_term=filters.search_term,
            post_id=str(filters.post_id) if filters.post_id else None,
            status=filters.status.value if filters.status else None,
            take=filters.take,
            skip=filters.skip,
        ):
            page = await self.comment_repository.search(filters)
            logfire.info(
                "Comment search completed",
                returned=len(page.items),
                total_count=page.total_count,
                has_more=page.has_more,
            )
            return page

    async def find_threads(
        self, filters: CommentFilter
    ) -> tuple[CommentPage, list[CommentThreadNode]]:
        """Paginated search with the replies of every hit expanded.

        Replies are restricted to ``filters.status`` like the hits
        themselves; the search term only selects the hits.

        Returns:
            The page and one thread node per item, in page order
        """
        page = await self.find(filters)

        rows_by_post: dict[PostId, list[Comment]] = {}
        nodes = []
        for item in page.items:
            if item.post_id not in rows_by_post:
                rows_by_post[item.post_id] = (
                    await self.comment_repository.find_by_post(
                        post_id=item.post_id, status=filters.status
                    )
                )
            rows = [c for c in rows_by_post[item.post_id] if c.id != item.id]
            node = self.thread_assembler.build_subtree([item, *rows], item.id)
            nodes.append(node or CommentThreadNode(comment=item))

        return page, nodes

    async def update(
        self,
        comment_id: CommentId,
        content: str | None = None,
        status: CommentStatus | None = None,
    ) -> Comment:
        """Partially update a comment.

        Only the supplied fields change; status and content are independent.

        Raises:
            NotFoundError: If the comment does not exist
            ValidationError: If the new content is empty or too long
        """
        with logfire.span(
            "comment_service.update",
            comment_id=str(comment_id),
            content_changed=content is not None,
            status=status.value if status else None,
        ):
            comment = await self.get_comment(comment_id)

            changes: dict = {}
            if content is not None:
                self._validate_content(content)
                changes["content"] = content
            if status is not None:
                changes["status"] = status
            if not changes:
                return comment

            changes["updated_at"] = datetime.now()
            updated = await self.comment_repository.save(
                comment.model_copy(update=changes)
            )
            logfire.info(
                "Comment updated",
                comment_id=str(comment_id),
                status=updated.status.value,
            )
            return updated

    async def set_status(
        self, comment_id: CommentId, status: CommentStatus
    ) -> Comment:
        """Overwrite the moderation status of a comment.

        Setting the status a comment already has succeeds and leaves it as is.

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span(
            "comment_service.set_status",
            comment_id=str(comment_id),
            status=status.value,
        ):
            comment = await self.get_comment(comment_id)
            if comment.status == status:
                logfire.info(
                    "Comment already in requested status",
                    comment_id=str(comment_id),
                    status=status.value,
                )
                return comment

            updated = await self.comment_repository.save(
                comment.model_copy(
                    update={"status": status, "updated_at": datetime.now()}
                )
            )
            logfire.info(
                "Comment status changed",
                comment_id=str(comment_id),
                previous=comment.status.value,
                status=status.value,
            )
            return updated

    async def approve(self, comment_id: CommentId) -> Comment:
        """Mark a comment APPROVED."""
        return await self.set_status(comment_id, CommentStatus.APPROVED)

    async def reject(self, comment_id: CommentId) -> Comment:
        """Mark a comment REJECTED."""
        return await self.set_status(comment_id, CommentStatus.REJECTED)

    async def delete(self, comment_id: CommentId) -> DeletionResult:
        """Delete a comment.

        Comments without replies are removed. Comments with replies are
        tombstoned instead so the thread keeps its shape.

        Raises:
            NotFoundError: If the comment does not exist
        """
        with logfire.span("comment_service.delete", comment_id=str(comment_id)):
            comment = await self.get_comment(comment_id)
            reply_count = await self.comment_repository.count_replies(comment_id)
            mode = deletion_mode(reply_count)

            if mode is DeletionMode.SOFT:
                result = await self.comment_repository.save(tombstone(comment))
            else:
                await self.comment_repository.delete(comment_id)
                result = comment

            logfire.info(
                "Comment deleted",
                comment_id=str(comment_id),
                mode=mode.value,
                reply_count=reply_count,
            )
            return DeletionResult(comment=result, mode=mode)

    async def _require_post(self, post_id: PostId) -> None:
        post = await self.post_repository.find_by_id(post_id)
        if not post:
            logfire.warn("Post not found", post_id=str(post_id))
            raise NotFoundError("Post", str(post_id))

    @staticmethod
    def _validate_content(content: str) -> None:
        if not content.strip():
            raise ValidationError("Comment content must not be empty")
        if len(content) > MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Comment content must be at most {MAX_CONTENT_LENGTH} characters"
            )
