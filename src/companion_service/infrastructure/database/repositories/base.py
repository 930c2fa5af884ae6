# src/companion_service/infrastructure/database/repositories/base.py
from typing import TypeVar, Generic, Sequence, Any, Literal, NamedTuple
from uuid import UUID
from contextlib import asynccontextmanager
from functools import wraps

from sqlalchemy import select, Select, func, asc, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from companion_service.domain.exceptions import StoreError
from companion_service.infrastructure.observability.logging import get_logger

T = TypeVar("T", bound=SQLModel)

logger = get_logger(__name__)


class PaginatedResult(NamedTuple):
    """Result of a paginated query."""
    items: Sequence[Any]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


@asynccontextmanager
async def store_errors(operation: str):
    """
    Translate driver/ORM failures into StoreError.

    The store's own message is kept so callers see why the write or read
    was rejected.

    Example:
        async with store_errors("count_by_author"):
            result = await session.execute(query)
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Store operation failed", operation=operation, error=str(exc))
        raise StoreError.from_store_error(exc, operation=operation) from exc


@asynccontextmanager
async def transaction(session: AsyncSession, operation: str):
    """
    Context manager for explicit transaction handling.

    Commits on success, rolls back on exception. Store failures raised
    while committing surface as StoreError.

    Example:
        async with transaction(session, "add_bookmark"):
            await bookmarks.add(companion_id, user_id)
        # committed here
    """
    try:
        yield
        async with store_errors(operation):
            await session.commit()
    except Exception:
        await session.rollback()
        raise


def transactional(func):
    """
    Decorator to wrap a method of an object holding ``self.session`` in a transaction.

    Example:
        @transactional
        async def add_to_session_history(self, companion_id, identity):
            return await self.history.append(companion_id, identity.user_id)
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        async with transaction(self.session, func.__name__):
            return await func(self, *args, **kwargs)
    return wrapper


class BaseRepository(Generic[T]):
    """
    Base repository with lookup, insert and pagination helpers.

    Every statement runs inside ``store_errors`` so callers only ever see
    StoreError for store-side failures.

    Example:
        class BookmarkRepository(BaseRepository[Bookmark]):
            def __init__(self, session: AsyncSession):
                super().__init__(Bookmark, session)
    """

    def __init__(self, model: type[T], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, id: UUID) -> T | None:
        """
        Get entity by ID.

        Returns:
            Entity or None if not found
        """
        async with store_errors(f"{self.model.__name__}.get"):
            return await self.session.get(self.model, id)

    async def create(self, entity: T) -> T:
        """
        Insert a new entity.

        The flush happens here so constraint violations are raised by this
        call rather than at commit time.

        Returns:
            Created entity with generated ID and timestamps
        """
        async with store_errors(f"{self.model.__name__}.create"):
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
        return entity

    async def all(self, query: Select) -> Sequence[T]:
        """Execute a select and return the scalar rows."""
        async with store_errors(f"{self.model.__name__}.query"):
            result = await self.session.execute(query)
            return result.scalars().all()

    def apply_sorting(
        self,
        query: Select,
        sort_by: str = "created_at",
        order: Literal["asc", "desc"] = "desc"
    ) -> Select:
        """
        Apply sorting with ``id`` as tiebreaker so equal timestamps keep a stable order.

        Example:
            query = apply_sorting(query, "created_at", "asc")
        """
        field = getattr(self.model, sort_by, self.model.created_at)
        direction = asc if order == "asc" else desc
        return query.order_by(direction(field), direction(self.model.id))

    async def paginate(
        self,
        query: Select,
        page: int = 1,
        page_size: int = 20
    ) -> PaginatedResult:
        """
        Paginate query results with metadata.

        Page ``n`` covers the zero-based rows ``(n-1)*page_size`` through
        ``n*page_size - 1`` of the ordered query.

        Args:
            query: SQLAlchemy select query (ordered, before pagination)
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            PaginatedResult with items and pagination metadata
        """
        page = max(1, page)

        async with store_errors(f"{self.model.__name__}.paginate"):
            count_query = select(func.count()).select_from(query.order_by(None).subquery())
            total_result = await self.session.execute(count_query)
            total = total_result.scalar_one()

            total_pages = (total + page_size - 1) // page_size
            offset = (page - 1) * page_size
            paginated_query = query.offset(offset).limit(page_size)


            result = await self.session.execute(paginated_query)
            items = result.scalars().all()

        return PaginatedResult(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

