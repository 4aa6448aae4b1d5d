"""
JSON file backend.

The whole collection lives in one pretty-printed JSON array. Readers take a
shared lock just long enough to read the bytes; writers take an exclusive
lock for the load/mutate/persist cycle and replace the file atomically via a
``.tmp`` sibling. Locks are taken on a ``.lock`` sidecar so that replacing
the data file never strands a waiter on a stale inode.
"""
import fcntl
import json
import logging
import os
from contextlib import contextmanager
from typing import Iterator, List

from string_analyzer.exceptions import ConflictError, NotFoundError, StorageUnavailableError
from string_analyzer.filters import Filter
from string_analyzer.schemas.string import StringRecord
from string_analyzer.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class FlatStore(StorageBackend):
    """Load-everything-then-scan backend over a single JSON file"""

    name = "flat"

    def __init__(self, path: str):
        self.path = os.path.abspath(path)
        self.tmp_path = self.path + ".tmp"
        self.lock_path = self.path + ".lock"

        directory = os.path.dirname(self.path)
        try:
            os.makedirs(directory, exist_ok=True)
            if not os.access(directory, os.W_OK):
                raise PermissionError(f"Directory is not writable: {directory}")
            with self._locked(fcntl.LOCK_EX):
                if not os.path.exists(self.path):
                    self._write([])
        except OSError as e:
            logger.error(f"❌ Flat store initialization failed: {e}")
            raise StorageUnavailableError(f"Flat store unavailable: {e}") from e

        logger.info(f"Flat store ready at {self.path}")

    # --------------------------------------------------------------------------
    # File handling
    # --------------------------------------------------------------------------
    @contextmanager
    def _locked(self, operation: int) -> Iterator[None]:
        with open(self.lock_path, "a") as handle:
            fcntl.flock(handle.fileno(), operation)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

    def _read_bytes(self) -> bytes:
        try:
            with open(self.path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return b""

    def _decode(self, raw: bytes) -> List[StringRecord]:
        """Parse the stored array; anything malformed counts as an empty collection"""
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [StringRecord.model_validate(item) for item in data]
        except ValueError as e:
            logger.warning(f"⚠️ Flat store at {self.path} is unreadable, treating it as empty: {e}")
            return []

    def _write(self, records: List[StringRecord]) -> None:
        payload = json.dumps([record.model_dump() for record in records], indent=4, ensure_ascii=False)
        with open(self.tmp_path, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(self.tmp_path, self.path)

    def _load(self) -> List[StringRecord]:
        with self._locked(fcntl.LOCK_SH):
            raw = self._read_bytes()
        return self._decode(raw)

    # --------------------------------------------------------------------------
    # Storage contract
    # --------------------------------------------------------------------------
    def create(self, value: str) -> StringRecord:
        record = self.build_record(value)

        with self._locked(fcntl.LOCK_EX):
            records = self._decode(self._read_bytes())
            if any(existing.value == record.value for existing in records):
                raise ConflictError()
            records.append(record)
            self._write(records)

        logger.info(f"Stored string {record.id[:12]} ({record.properties.length} chars)")
        return record

    def get(self, value: str) -> StringRecord:
        for record in self._load():
            if record.value == value:
                return record
        raise NotFoundError()

    def delete(self, value: str) -> None:
        with self._locked(fcntl.LOCK_EX):
            records = self._decode(self._read_bytes())
            remaining = [record for record in records if record.value != value]
            if len(remaining) == len(records):
                raise NotFoundError()
            self._write(remaining)

        logger.info(f"Deleted string {value!r}")

    def list(self, filters: Filter) -> List[StringRecord]:
        return filters.apply(self._load())

    def count(self) -> int:
        return len(self._load())
