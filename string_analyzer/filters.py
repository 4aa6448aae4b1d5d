"""
Backend-agnostic filter over stored strings.

Raw query values are coerced leniently: anything that does not parse for
its constraint is dropped rather than rejected, so a bad ``word_count=abc``
simply stops restricting the result set. Both storage backends consume the
coerced ``Filter`` so they always agree on which constraints are active.
"""
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from string_analyzer.schemas.string import StringRecord

TRUE_VALUES = {"1", "true", "on", "yes"}
FALSE_VALUES = {"0", "false", "off", "no", ""}

NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def coerce_bool(raw: Any) -> Optional[bool]:
    """Parse a boolean the lenient way; None when it is not recognisable"""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        text = raw.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    return None


def coerce_int(raw: Any) -> Optional[int]:
    """Parse integer or decimal input, truncating toward zero; None otherwise"""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else None
    if isinstance(raw, str) and NUMERIC_PATTERN.match(raw):
        try:
            return int(raw)
        except ValueError:
            number = float(raw)
            return int(number) if math.isfinite(number) else None
    return None


def coerce_substring(raw: Any) -> Optional[str]:
    if isinstance(raw, str) and raw:
        return raw
    return None


class Filter(BaseModel):
    """Optional constraints, ANDed together; None means 'not restricting'"""

    model_config = {"frozen": True}

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "Filter":
        """Build a filter from raw query values, dropping anything unparseable"""
        return cls(
            is_palindrome=coerce_bool(params.get("is_palindrome")),
            min_length=coerce_int(params.get("min_length")),
            max_length=coerce_int(params.get("max_length")),
            word_count=coerce_int(params.get("word_count")),
            contains_character=coerce_substring(params.get("contains_character")),
        )

    def is_empty(self) -> bool:
        return not self.as_dict()

    def as_dict(self) -> Dict[str, Any]:
        """Active constraints only"""
        return self.model_dump(exclude_none=True)

    def matches(self, record: StringRecord) -> bool:
        props = record.properties

        if self.is_palindrome is not None and props.is_palindrome != self.is_palindrome:
            return False
        if self.min_length is not None and props.length < self.min_length:
            return False
        if self.max_length is not None and props.length > self.max_length:
            return False
        if self.word_count is not None and props.word_count != self.word_count:
            return False
        if self.contains_character is not None and self.contains_character not in record.value:
            return False
        return True

    def apply(self, records: Iterable[StringRecord]) -> List[StringRecord]:
        """Matching records, in the order they were given"""
        return [record for record in records if self.matches(record)]
