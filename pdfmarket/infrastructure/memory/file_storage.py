import uuid
from typing import BinaryIO, Dict, Optional, Tuple

from pdfmarket.domains.repositories import FileStorage


class InMemoryFileStorage(FileStorage):
    """Файловое хранилище в памяти: ссылка -> (имя, тип, байты)"""

    def __init__(self):
        self.files: Dict[str, Tuple[str, Optional[str], bytes]] = {}

    async def put(self, stream: BinaryIO, file_name: str, content_type: Optional[str] = None) -> str:
        storage_ref = uuid.uuid4().hex
        self.files[storage_ref] = (file_name, content_type, stream.read())
        return storage_ref

    async def get(self, storage_ref: str, target: BinaryIO) -> None:
        try:
            _, _, content = self.files[storage_ref]
        except KeyError:
            raise FileNotFoundError(storage_ref)
        target.write(content)

    async def delete(self, storage_ref: str) -> None:
        if self.files.pop(storage_ref, None) is None:
            raise FileNotFoundError(storage_ref)
