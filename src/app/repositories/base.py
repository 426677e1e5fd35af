"""Base repository with common CRUD operations."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.app.schemas.pagination import decode_cursor, encode_cursor


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    async def create(self, entity: ModelType) -> ModelType:
        """Add entity and flush so server defaults and constraints apply (no commit)."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run a newest-first keyset page over `cursor_field`.

        The cursor encodes the last returned item's `cursor_field` value. An
        undecodable cursor restarts from the first page.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        if cursor:
            try:
                after = decode_cursor(cursor)
            except ValueError:
                after = None
            # A cursor minted for a different sort key is treated as absent
            if isinstance(after, cursor_field.type.python_type):
                query = query.where(cursor_field < after)

        result = await self.session.execute(
            query.order_by(cursor_field.desc()).limit(limit + 1)
        )
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]

        next_cursor = None
        if has_more and items:
            value = getattr(items[-1], cursor_field.key)
            if value is not None:
                next_cursor = encode_cursor(value)

        return items, next_cursor, has_more
