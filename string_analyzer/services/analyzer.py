import hashlib
from collections import Counter
from datetime import datetime, timezone
from typing import Dict

from string_analyzer.exceptions import InvalidValueError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def normalize_value(value: str) -> str:
    """Trim a submitted value, rejecting blank strings"""
    if not isinstance(value, str):
        raise InvalidValueError("Value must be a string")
    value = value.strip()
    if not value:
        raise InvalidValueError()
    return value


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def is_palindrome(text: str) -> bool:
    """Check if string reads the same backwards (case-insensitive)"""
    lowered = text.lower()
    return lowered == lowered[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters in string"""
    return len(set(text))


def count_words(text: str) -> int:
    """Count words separated by whitespace"""
    return len(text.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character"""
    return dict(Counter(text))


def analyze_string(value: str) -> Dict:
    """Analyze a string and return all computed properties"""
    return {
        "length": len(value),
        "is_palindrome": is_palindrome(value),
        "unique_characters": count_unique_characters(value),
        "word_count": count_words(value),
        "sha256_hash": compute_sha256(value),
        "character_frequency_map": get_character_frequency(value),
    }


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with second precision and a Z suffix"""
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)
