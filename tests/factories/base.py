# tests/factories/base.py
"""
Base factory classes for Factory Boy integration.

Factories build SQLModel instances; ``create_async`` persists them through
an async session, since factory_boy's own SQLAlchemy strategy is sync only.
"""

from typing import Any
from uuid import uuid4

import factory
from sqlalchemy.ext.asyncio import AsyncSession


class AsyncSQLModelFactory(factory.Factory):
    """
    Base factory for SQLModel database models with async session support.

    Usage:
        class CompanionFactory(AsyncSQLModelFactory):
            class Meta:
                model = Companion

            name = factory.Sequence(lambda n: f"Companion {n}")

        # In tests:
        async def test_companion(db_session):
            companion = await CompanionFactory.create_async(db_session, subject="maths")
            assert companion.id is not None
    """

    class Meta:
        abstract = True

    id = factory.LazyFunction(uuid4)

    @classmethod
    async def create_async(cls, session: AsyncSession, **kwargs: Any):
        """
        Build one instance, commit it and return it refreshed.

        Usage:
            companion = await CompanionFactory.create_async(db_session, author="u1")
        """
        instance = cls.build(**kwargs)
        session.add(instance)
        await session.commit()
        await session.refresh(instance)
        return instance

    @classmethod
    async def create_batch_async(cls, session: AsyncSession, size: int, **kwargs: Any) -> list:
        """
        Build ``size`` instances and commit them together.

        Instances come back in build order, which for sequenced timestamps
        is also creation order.
        """
        instances = cls.build_batch(size, **kwargs)
        session.add_all(instances)
        await session.commit()

        for instance in instances:
            await session.refresh(instance)

        return instances
