import logging
import operator
from typing import List, Optional

from sqlalchemy import and_, false, func, true
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from string_analyzer.database import build_session_factory, create_db_engine, init_db, session_scope
from string_analyzer.exceptions import ConflictError, NotFoundError
from string_analyzer.filters import Filter
from string_analyzer.models.string_entry import StringEntry
from string_analyzer.schemas.string import StringProperties, StringRecord
from string_analyzer.storage.base import StorageBackend

logger = logging.getLogger(__name__)


# SQLite INTEGER is a signed 64-bit value
SQL_INTEGER_MIN = -(2 ** 63)
SQL_INTEGER_MAX = 2 ** 63 - 1


def to_record(entry: StringEntry) -> StringRecord:
    return StringRecord(
        id=entry.id,
        value=entry.value,
        properties=StringProperties(**entry.properties),
        created_at=entry.created_at,
    )


def integer_condition(expression, compare, bound: int):
    """Compare against a bound, folding bounds the driver cannot bind into a constant"""
    if SQL_INTEGER_MIN <= bound <= SQL_INTEGER_MAX:
        return compare(expression, bound)
    # stored counts always fit, so every row compares the same way
    return true() if compare(0, bound) else false()


def filter_conditions(filters: Filter) -> list:
    """Translate active filter constraints into SQL conditions"""
    properties = StringEntry.properties
    conditions = []

    if filters.is_palindrome is not None:
        conditions.append(properties["is_palindrome"].as_boolean() == filters.is_palindrome)

    if filters.min_length is not None:
        conditions.append(integer_condition(properties["length"].as_integer(), operator.ge, filters.min_length))

    if filters.max_length is not None:
        conditions.append(integer_condition(properties["length"].as_integer(), operator.le, filters.max_length))

    if filters.word_count is not None:
        conditions.append(integer_condition(properties["word_count"].as_integer(), operator.eq, filters.word_count))

    if filters.contains_character is not None:
        # INSTR is case-sensitive, unlike LIKE on SQLite
        conditions.append(func.instr(StringEntry.value, filters.contains_character) > 0)

    return conditions


class IndexedStore(StorageBackend):
    """Relational backend; filters are evaluated by the database engine"""

    name = "indexed"

    def __init__(self, database_url: str):
        self.engine = create_db_engine(database_url)
        init_db(self.engine)
        self._session_factory = build_session_factory(self.engine)

    def _find(self, db: Session, value: str) -> Optional[StringEntry]:
        return db.query(StringEntry).filter(StringEntry.value == value).first()

    def create(self, value: str) -> StringRecord:
        record = self.build_record(value)

        with session_scope(self._session_factory) as db:
            if self._find(db, record.value) is not None:
                raise ConflictError()

            db.add(
                StringEntry(
                    id=record.id,
                    value=record.value,
                    properties=record.properties.model_dump(),
                    created_at=record.created_at,
                )
            )
            try:
                db.commit()
            except IntegrityError:
                # Lost a race with a concurrent create of the same value
                db.rollback()
                raise ConflictError() from None

        logger.info(f"Stored string {record.id[:12]} ({record.properties.length} chars)")
        return record

    def get(self, value: str) -> StringRecord:
        with session_scope(self._session_factory) as db:
            entry = self._find(db, value)
            if entry is None:
                raise NotFoundError()
            return to_record(entry)

    def delete(self, value: str) -> None:
        with session_scope(self._session_factory) as db:
            deleted = (
                db.query(StringEntry)
                .filter(StringEntry.value == value)
                .delete(synchronize_session=False)
            )
            db.commit()

        if not deleted:
            raise NotFoundError()
        logger.info(f"Deleted string {value!r}")

    def list(self, filters: Filter) -> List[StringRecord]:
        with session_scope(self._session_factory) as db:
            query = db.query(StringEntry)
            conditions = filter_conditions(filters)
            if conditions:
                query = query.filter(and_(*conditions))
            return [to_record(entry) for entry in query.all()]

    def count(self) -> int:
        with session_scope(self._session_factory) as db:
            return db.query(StringEntry).count()
