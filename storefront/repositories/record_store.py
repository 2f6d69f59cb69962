# storefront/repositories/record_store.py
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, TypeVar

from pydantic import ValidationError

from storefront.core.storage_utils import atomic_write_text, read_text
from storefront.models.record import Record

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)

# Fields owned by the store; values supplied by callers are dropped.
MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})


class PersistenceError(RuntimeError):
    """The store could not write its JSON document; nothing was changed."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore(Generic[RecordT]):
    """
    CRUD over a homogeneous record set kept in one JSON array on disk.

    - Records are held in memory as JSON-ready dicts; every record handed
      out is a freshly validated model, never a reference into the store.
    - Ids are decimal strings: max numeric id + 1 ("1" for an empty file).
    - Writes replace the whole document atomically (temp file + rename).
    - Unreadable / corrupt files load as an empty store (logged). Failed
      writes raise PersistenceError and leave memory and disk as they were.

    Concurrency:
      Several worker processes may share one file. With
      `reload_on_access=True` every operation re-reads the file first,
      which keeps concurrent writers on *different* records safe. There is
      no locking: two writers touching the same record at the same time
      race, and the later full-file write wins. This is a single-writer
      design; swap in a transactional store before relying on concurrent
      writes.
    """

    model: type[RecordT]
    entity: str = "record"

    def __init__(
        self,
        path: str | Path,
        *,
        reload_on_access: bool = True,
        seed: Iterable[dict[str, Any]] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.path = Path(path)
        self.reload_on_access = reload_on_access
        self._clock = clock
        self._records: list[dict[str, Any]] = []

        if seed is not None and not self.path.exists():
            for fields in seed:
                self.create(fields)
            logger.info(f"Seeded {self.path} with {len(self._records)} {self.entity}(s)")
        else:
            self.reload()

    # ----- Loading / saving -----

    def reload(self) -> None:
        """
        Re-read the backing file into memory.

        A missing file is an empty store. A file that cannot be read or
        parsed, or that holds anything other than a JSON array, is also
        treated as empty so a corrupt file never stops the app from
        booting. Individual entries that are not valid records are
        skipped (and logged); the rest of the file still loads.
        """
        try:
            text = read_text(self.path)
            if text is None:
                self._records = []
                return
            data = json.loads(text)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading {self.entity} records from {self.path}: {e}")
            self._records = []
            return

        records: list[dict[str, Any]] = []
        for position, raw in enumerate(data):
            try:
                records.append(self.model.model_validate(raw).model_dump(mode="json"))
            except ValidationError as e:
                logger.error(
                    f"Skipping invalid {self.entity} record #{position} in {self.path}: {e}"
                )
        self._records = records

    def _refresh(self) -> None:
        if self.reload_on_access:
            self.reload()

    def _commit(self, records: list[dict[str, Any]]) -> None:
        """
        Persist `records` and only then make them the in-memory state.

        Raises ValueError for NaN / Infinity: the file must stay strict JSON.
        """
        text = json.dumps(records, ensure_ascii=False, indent=2, allow_nan=False)
        try:
            atomic_write_text(self.path, text)
        except OSError as e:
            logger.error(f"Error saving {self.entity} records to {self.path}: {e}")
            raise PersistenceError(f"Failed to write {self.path}") from e
        self._records = records

    # ----- Hooks for entity stores -----

    def prepare_create(self, fields: dict[str, Any], record_id: str) -> dict[str, Any]:
        """Fill defaults for a new record. Trimming/clamping is done by the model."""
        return fields

    def prepare_update(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Adjust a partial update before it is merged."""
        return fields

    # ----- Helpers -----

    def _to_model(self, raw: dict[str, Any]) -> RecordT:
        return self.model.model_validate(raw)

    def _index_of(self, record_id: str) -> int | None:
        for i, raw in enumerate(self._records):
            if raw.get("id") == record_id:
                return i
        return None

    def _next_id(self) -> str:
        highest = 0
        for raw in self._records:
            try:
                highest = max(highest, int(raw.get("id")))
            except (TypeError, ValueError):
                continue
        return str(highest + 1)

    @staticmethod
    def _without_managed(fields: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in fields.items() if k not in MANAGED_FIELDS}

    # ----- Reads -----

    def get_all(self) -> list[RecordT]:
        """All records, in insertion order."""
        self._refresh()
        return [self._to_model(raw) for raw in self._records]

    def get_by_id(self, record_id: str) -> RecordT | None:
        self._refresh()
        index = self._index_of(record_id)
        if index is None:
            return None
        return self._to_model(self._records[index])

    # ----- Writes -----

    def create(self, fields: dict[str, Any]) -> RecordT:
        """
        Insert a new record.

        Steps:
          1. Reload (so ids computed by other workers are seen).
          2. Assign id = max numeric id + 1.
          3. Sanitize via the model (trim strings, clamp numbers, defaults).
          4. Stamp created_at / updated_at.
          5. Append and persist.

        Raises:
            ValidationError: fields do not form a valid record (nothing stored).
            PersistenceError: the file could not be written (nothing stored).
        """
        self._refresh()

        record_id = self._next_id()
        now = self._clock()
        data = self.prepare_create(self._without_managed(fields), record_id)
        record = self.model.model_validate(
            {**data, "id": record_id, "created_at": now, "updated_at": now}
        )
        raw = record.model_dump(mode="json")

        self._commit([*self._records, raw])
        logger.info(f"{self.entity.capitalize()} created: id={record_id}")
        return self._to_model(raw)

    def update(self, record_id: str, fields: dict[str, Any]) -> RecordT | None:
        """
        Merge `fields` into an existing record.

        Only keys present in `fields` change. id and created_at always keep
        their stored values; updated_at is refreshed.

        Returns:
            The updated record, or None if no record has this id (the file
            is left untouched).
        """
        self._refresh()

        index = self._index_of(record_id)
        if index is None:
            return None

        current = self._records[index]
        changes = self.prepare_update(self._without_managed(fields))
        record = self.model.model_validate(
            {
                **current,
                **changes,
                "id": current["id"],
                "created_at": current["created_at"],
                "updated_at": self._clock(),
            }
        )
        raw = record.model_dump(mode="json")

        records = list(self._records)
        records[index] = raw
        self._commit(records)
        logger.info(f"{self.entity.capitalize()} updated: id={record_id} fields={sorted(changes)}")
        return self._to_model(raw)

    def delete(self, record_id: str) -> bool:
        """
        Remove a record for good.

        Returns:
            True if it existed and the file was rewritten, False otherwise.
        """
        self._refresh()

        index = self._index_of(record_id)
        if index is None:
            return False

        self._commit(self._records[:index] + self._records[index + 1 :])
        logger.info(f"{self.entity.capitalize()} deleted: id={record_id}")
        return True
