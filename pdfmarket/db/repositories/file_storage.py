import uuid
from typing import BinaryIO, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import async_sessionmaker

from pdfmarket.db.models.stored_file import StoredFileModel
from pdfmarket.domains.repositories import FileStorage


class DatabaseFileStorage(FileStorage):
    """Хранение байтов PDF в таблице stored_files.

    Работает в собственной сессии: файл сохраняется до метаданных
    документа и не зависит от их транзакции.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def put(self, stream: BinaryIO, file_name: str, content_type: Optional[str] = None) -> str:
        """Сохранение файла, возвращает ссылку"""
        content = stream.read()
        storage_ref = uuid.uuid4().hex

        async with self.session_factory() as session:
            session.add(StoredFileModel(
                id=storage_ref,
                file_name=file_name,
                content_type=content_type,
                length=len(content),
                content=content
            ))
            await session.commit()

        return storage_ref

    async def get(self, storage_ref: str, target: BinaryIO) -> None:
        """Чтение файла в target"""
        async with self.session_factory() as session:
            result = await session.execute(
                select(StoredFileModel.content).where(StoredFileModel.id == storage_ref)
            )
            content = result.scalar_one_or_none()

        if content is None:
            raise FileNotFoundError(storage_ref)
        target.write(content)

    async def delete(self, storage_ref: str) -> None:
        """Удаление файла"""
        async with self.session_factory() as session:
            result = await session.execute(
                delete(StoredFileModel).where(StoredFileModel.id == storage_ref)
            )
            await session.commit()

        if result.rowcount == 0:
            raise FileNotFoundError(storage_ref)
