"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.domain.model import Comment
from blog.domain.repository import CommentFilter, CommentPage, CommentRepository
from blog.domain.value import CommentId, CommentStatus, PostId, UserId
from blog.persistence.mappers import comment_to_dict, row_to_comment
from blog.persistence.tables import comments_table

# Newest first; id breaks ties between rows written in the same instant
NEWEST_FIRST = (desc(comments_table.c.created_at), desc(comments_table.c.id))


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_post(
        self,
        post_id: PostId,
        status: Optional[CommentStatus] = None,
    ) -> List[Comment]:
        """Find all comments for a post, newest first."""
        stmt = select(comments_table).where(comments_table.c.post_id == post_id)

        if status is not None:
            stmt = stmt.where(comments_table.c.status == status.value)

        stmt = stmt.order_by(*NEWEST_FIRST)

        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_by_author(self, author_id: UserId) -> List[Comment]:
        """Find comments by a specific author."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.author_id == author_id)
            .order_by(*NEWEST_FIRST)
        )

        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_replies(self, comment_id: CommentId) -> int:
        """Count direct replies to a comment."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.parent_id == comment_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def search(self, filters: CommentFilter) -> CommentPage:
        """Paginated search over all comments."""
        conditions = []
        if filters.search_term:
            conditions.append(
                comments_table.c.content.icontains(
                    filters.search_term, autoescape=True
                )
            )
        if filters.author_id:
            conditions.append(comments_table.c.author_id == filters.author_id)
        if filters.post_id:
            conditions.append(comments_table.c.post_id == filters.post_id)
        if filters.status:
            conditions.append(comments_table.c.status == filters.status.value)
        if filters.root_only:
            conditions.append(comments_table.c.parent_id.is_(None))

        count_stmt = (
            select(func.count()).select_from(comments_table).where(*conditions)
        )
        total_count = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(comments_table)
            .where(*conditions)
            .order_by(*NEWEST_FIRST)
            .limit(filters.take)
            .offset(filters.skip)
        )
        result = await self.session.execute(stmt)
        items = [row_to_comment(row._asdict()) for row in result.fetchall()]

        return CommentPage.from_slice(items, total_count, filters)

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        existing = await self.find_by_id(comment.id)
        comment_dict = comment_to_dict(comment)

        if existing:
            stmt = (
                comments_table.update()
                .where(comments_table.c.id == comment.id)
                .values(**comment_dict)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return comment

    async def delete(self, comment_id: CommentId) -> None:
        """Delete a comment (hard delete)."""
        stmt = comments_table.delete().where(comments_table.c.id == comment_id)
        await self.session.execute(stmt)
        await self.session.flush()
