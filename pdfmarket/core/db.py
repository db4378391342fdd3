from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from pdfmarket.core.config import settings
from pdfmarket.db.base import Base

# Асинхронный движок
engine = create_async_engine(settings.database_url, echo=settings.database_echo, pool_pre_ping=True)

# Сессии
SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Создание таблиц, если их нет"""
    import pdfmarket.db.models  # noqa: F401 регистрирует модели в metadata

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_uow():
    """Единица работы поверх сессии запроса"""
    from pdfmarket.db.unit_of_work import SqlAlchemyUnitOfWork

    async with SessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_file_storage():
    """Хранилище файлов PDF"""
    from pdfmarket.db.repositories.file_storage import DatabaseFileStorage

    return DatabaseFileStorage(SessionLocal)
