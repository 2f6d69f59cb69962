# storefront/repositories/cart_repo.py
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from storefront.core.storage_utils import atomic_write_text, read_text


class CartStorage(Protocol):
    """
    Key/value storage a CartStore mirrors itself into.

    Values are opaque strings (the serialized cart). Implementations may
    raise on any call; the cart treats storage as best-effort.
    """

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryCartStorage:
    """Process-local storage, handy for tests and single-shot scripts."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileCartStorage:
    """
    One JSON file per key inside `directory`.

    Keys are percent-encoded into file names, so any key string is safe.
    Writes use the same temp-file + rename as the record stores.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def read(self, key: str) -> str | None:
        return read_text(self.path_for(key))

    def write(self, key: str, value: str) -> None:
        atomic_write_text(self.path_for(key), value)

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)
