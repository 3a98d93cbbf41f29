"""Local filesystem implementation of ImageStorageRepository."""

import os
import shutil
from pathlib import Path
from typing import BinaryIO

from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import DIRECTORY_MODE


class LocalImageStorage(ImageStorageRepository):
    """Stores images as plain files (local disk or a mounted volume such as EFS).

    Errors from the operating system are not translated here; the layout
    manager and services map them to domain errors.
    """

    def join(self, *parts: str) -> str:
        return os.path.join(*parts)

    def make_dirs(self, location: str) -> None:
        Path(location).mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)

    def list_dir(self, location: str) -> list[str]:
        directory = Path(location)
        if not directory.is_dir():
            return []
        return sorted(entry.name for entry in directory.iterdir())

    def exists(self, location: str) -> bool:
        return Path(location).is_file()

    def write_stream(self, location: str, stream: BinaryIO) -> int:
        with open(location, "wb") as out:
            shutil.copyfileobj(stream, out)
            return out.tell()

    def read_bytes(self, location: str) -> bytes:
        return Path(location).read_bytes()

    def remove(self, location: str) -> None:
        Path(location).unlink()
