from sqlalchemy import select, update as sqlalchemy_update, delete as sqlalchemy_delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


class BaseDAO:
    model = None

    @classmethod
    async def add(cls, session: AsyncSession, **values):
        new_instance = cls.model(**values)
        session.add(new_instance)
        try:
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
        await session.refresh(new_instance)
        return new_instance

    @classmethod
    async def find_one_or_none_by_id(cls, session: AsyncSession, model_id: int):
        query = select(cls.model).filter_by(id=model_id)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def find_one_or_none(cls, session: AsyncSession, **filter_by):
        query = select(cls.model).filter_by(**filter_by)
        result = await session.execute(query)
        return result.scalar_one_or_none()

    @classmethod
    async def update(cls, session: AsyncSession, filter_by: dict, **values):
        """Обновляет записи и возвращает количество затронутых строк. None-значения пропускаются."""
        values = {k: v for k, v in values.items() if v is not None}
        if not values:
            return 0

        query = sqlalchemy_update(cls.model)\
            .where(*[getattr(cls.model, k) == v for k, v in filter_by.items()])\
            .values(**values)\
            .execution_options(synchronize_session="fetch")
        try:
            result = await session.execute(query)
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
        return result.rowcount

    @classmethod
    async def delete(cls, session: AsyncSession, **filter_by):
        query = sqlalchemy_delete(cls.model).filter_by(**filter_by)
        try:
            result = await session.execute(query)
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise
        return result.rowcount
