from abc import ABC, abstractmethod
from typing import List

from string_analyzer.filters import Filter
from string_analyzer.schemas.string import StringProperties, StringRecord
from string_analyzer.services.analyzer import analyze_string, normalize_value, utc_timestamp


class StorageBackend(ABC):
    """
    Contract shared by every persistence backend.

    Records are keyed by their value. Implementations must return the same
    records from ``list`` for the same filter and collection state; only the
    evaluation strategy and durability characteristics differ.
    """

    name = "base"

    @abstractmethod
    def create(self, value: str) -> StringRecord:
        """Analyze and persist a new value; ConflictError if it already exists"""

    @abstractmethod
    def get(self, value: str) -> StringRecord:
        """NotFoundError if absent"""

    @abstractmethod
    def delete(self, value: str) -> None:
        """NotFoundError if absent"""

    @abstractmethod
    def list(self, filters: Filter) -> List[StringRecord]:
        """Records matching the filter, in store order"""

    @abstractmethod
    def count(self) -> int:
        ...

    @staticmethod
    def build_record(value: str) -> StringRecord:
        """Normalize and analyze a value into a record ready to persist"""
        value = normalize_value(value)
        properties = analyze_string(value)
        return StringRecord(
            id=properties["sha256_hash"],
            value=value,
            properties=StringProperties(**properties),
            created_at=utc_timestamp(),
        )
