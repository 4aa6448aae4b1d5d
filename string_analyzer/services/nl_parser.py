"""
Heuristic extraction of filters from natural language queries.

Examples:
- "all single word palindromic strings" -> {word_count: 1, is_palindrome: true}
- "strings longer than 10 characters" -> {min_length: 11}
- "strings containing the letter z" -> {contains_character: "z"}

Each rule looks at the same lower-cased text and contributes at most one
constraint. Only explicit cues are recognised; there is no negation.
"""
import logging
import re
from typing import Any, Callable, Dict, Optional, Tuple

from string_analyzer.exceptions import ExtractionFailedError
from string_analyzer.filters import Filter

logger = logging.getLogger(__name__)

SINGLE_WORD_PATTERN = re.compile(r"single word|one word")
WORD_COUNT_PATTERN = re.compile(r"(\d+) words?")
LONGER_THAN_PATTERN = re.compile(r"longer than (\d+)")
SHORTER_THAN_PATTERN = re.compile(r"shorter than (\d+)")
CONTAINS_PATTERN = re.compile(r"contain(?:ing)? (?:the )?(?:letter )?([a-z])")

Rule = Callable[[str], Optional[Tuple[str, Any]]]


def palindrome_rule(text: str):
    if "palindrom" in text:
        return "is_palindrome", True
    return None


def word_count_rule(text: str):
    # "single word" wins over a numeric count
    if SINGLE_WORD_PATTERN.search(text):
        return "word_count", 1
    match = WORD_COUNT_PATTERN.search(text)
    if match:
        return "word_count", int(match.group(1))
    return None


def longer_than_rule(text: str):
    match = LONGER_THAN_PATTERN.search(text)
    if match:
        return "min_length", int(match.group(1)) + 1
    return None


def shorter_than_rule(text: str):
    match = SHORTER_THAN_PATTERN.search(text)
    if match:
        return "max_length", int(match.group(1)) - 1
    return None


def contains_rule(text: str):
    match = CONTAINS_PATTERN.search(text)
    if match:
        return "contains_character", match.group(1)
    return None


RULES: Tuple[Rule, ...] = (
    palindrome_rule,
    word_count_rule,
    longer_than_rule,
    shorter_than_rule,
    contains_rule,
)


def parse_natural_language_query(query: str) -> Filter:
    """
    Parse natural language query into a Filter.
    An empty Filter means nothing could be extracted.
    """
    text = query.lower()
    constraints: Dict[str, Any] = {}

    for rule in RULES:
        result = rule(text)
        if result is not None:
            field, value = result
            constraints[field] = value

    return Filter(**constraints)


def interpret_query(query: str) -> Filter:
    """
    Parse a query, raising when no rule fired.
    A partial interpretation, even one no record can satisfy, is still a success.
    """
    parsed = parse_natural_language_query(query)

    if parsed.is_empty():
        logger.info(f"No filters extracted from query: {query!r}")
        raise ExtractionFailedError()

    return parsed
