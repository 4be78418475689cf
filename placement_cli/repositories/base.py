from pathlib import Path
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

from placement_cli.errors import PersistenceError
from placement_cli.utils.delimited import numeric_suffix, read_rows, write_rows
from placement_cli.utils.id_generator import IdGenerator
from placement_cli.utils.logging_config import get_logger

T = TypeVar("T")

logger = get_logger(__name__)
persistence_logger = get_logger("placement_cli.persistence")


class DelimitedFileRepository(Generic[T]):
    """Keyed in-memory collection optionally bound to a delimited text file.

    When bound, every mutation rewrites the whole file and ``reload`` replaces
    the in-memory state with the file contents. I/O failures are logged and
    absorbed: the in-memory mutation stands and the next successful write
    brings the file back in line.
    """

    header: Sequence[str] = ()
    id_prefix: Optional[str] = None
    entity_name = "record"

    def __init__(
        self,
        storage_path: Optional[Path] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        self.storage_path = Path(storage_path) if storage_path else None
        self.id_generator = id_generator or IdGenerator()
        self._items: Dict[str, T] = {}

    # Subclass hooks

    def _key(self, entity: T) -> str:
        return getattr(entity, "id")

    def _to_row(self, entity: T) -> List[str]:
        raise NotImplementedError

    def _from_row(self, row: List[str]) -> Optional[T]:
        raise NotImplementedError

    # Collection API

    def next_id(self) -> str:
        if not self.id_prefix:
            raise ValueError(f"{type(self).__name__} does not generate ids")
        return self.id_generator.new_id(self.id_prefix)

    def save(self, entity: T) -> T:
        """Insert or replace by id, then persist."""
        if entity is None:
            raise ValueError(f"Cannot save an empty {self.entity_name}")
        key = self._key(entity)
        existing = self._lookup_key(key)
        if existing is not None:
            del self._items[existing]
        self._items[key] = entity
        self.persist()
        return entity

    def find_by_id(self, entity_id: Optional[str]) -> Optional[T]:
        if not entity_id:
            return None
        key = self._lookup_key(entity_id)
        return self._items[key] if key is not None else None

    def find_all(self) -> List[T]:
        return list(self._items.values())

    def delete(self, entity: T) -> bool:
        key = self._lookup_key(self._key(entity))
        if key is None:
            return False
        del self._items[key]
        self.persist()
        return True

    def __len__(self) -> int:
        return len(self._items)

    def _lookup_key(self, entity_id: str) -> Optional[str]:
        if entity_id in self._items:
            return entity_id
        lowered = entity_id.lower()
        for key in self._items:
            if key.lower() == lowered:
                return key
        return None

    # Persistence

    @property
    def is_bound(self) -> bool:
        return self.storage_path is not None

    def persist(self) -> None:
        if self.storage_path is None:
            return
        try:
            write_rows(
                self.storage_path,
                self.header,
                (self._to_row(entity) for entity in self._items.values()),
            )
        except PersistenceError as e:
            persistence_logger.error(e.message)

    def reload(self) -> None:
        """Replace in-memory state with the bound file's contents."""
        if self.storage_path is None:
            return
        try:
            rows = read_rows(self.storage_path, len(self.header))
        except PersistenceError as e:
            persistence_logger.error(e.message)
            return

        loaded: Dict[str, T] = {}
        max_suffix = 0
        for row in rows:
            if not row[0]:
                continue
            entity = self._from_row(row)
            if entity is None:
                continue
            key = self._key(entity)
            loaded[key] = entity
            max_suffix = max(max_suffix, numeric_suffix(key))

        self._items = loaded
        if self.id_prefix:
            self.id_generator.seed(self.id_prefix, max_suffix)
        logger.debug(
            f"Loaded {len(loaded)} {self.entity_name}(s) from {self.storage_path}"
        )
