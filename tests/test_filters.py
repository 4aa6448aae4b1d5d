import pytest

from string_analyzer.filters import Filter, coerce_bool, coerce_int
from string_analyzer.storage.base import StorageBackend


def record(value):
    return StorageBackend.build_record(value)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("yes", True),
        ("on", True),
        ("false", False),
        ("0", False),
        ("No", False),
        (True, True),
        (False, False),
        ("maybe", None),
        ("", False),
        (None, None),
    ],
)
def test_coerce_bool(raw, expected):
    assert coerce_bool(raw) is expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("5", 5),
        (" 12 ", 12),
        ("-3", -3),
        ("5.9", 5),
        ("1e2", 100),
        (7, 7),
        (7.5, 7),
        ("abc", None),
        ("", None),
        ("nan", None),
        ("1e999", None),
        (True, None),
        (None, None),
    ],
)
def test_coerce_int(raw, expected):
    assert coerce_int(raw) == expected


def test_from_params_drops_invalid_values():
    filters = Filter.from_params(
        {
            "is_palindrome": "perhaps",
            "min_length": "abc",
            "max_length": "",
            "word_count": "abc",
            "contains_character": "",
        }
    )

    assert filters.is_empty()
    assert filters.as_dict() == {}


def test_from_params_keeps_valid_values():
    filters = Filter.from_params(
        {"is_palindrome": "true", "min_length": "3", "word_count": "1", "contains_character": "a"}
    )

    assert filters.as_dict() == {
        "is_palindrome": True,
        "min_length": 3,
        "word_count": 1,
        "contains_character": "a",
    }


def test_false_palindrome_filter_is_active():
    filters = Filter.from_params({"is_palindrome": "false"})

    assert filters.as_dict() == {"is_palindrome": False}
    assert filters.matches(record("hello"))
    assert not filters.matches(record("noon"))


def test_length_bounds_are_inclusive():
    filters = Filter(min_length=5, max_length=5)

    assert filters.matches(record("abcde"))
    assert not filters.matches(record("abcd"))
    assert not filters.matches(record("abcdef"))


def test_word_count_is_exact():
    filters = Filter(word_count=2)

    assert filters.matches(record("hello world"))
    assert not filters.matches(record("hello"))
    assert not filters.matches(record("one two three"))


def test_contains_is_case_sensitive_substring():
    hello = record("hello")

    assert Filter(contains_character="e").matches(hello)
    assert Filter(contains_character="ell").matches(hello)
    assert not Filter(contains_character="E").matches(hello)
    assert not Filter(contains_character="z").matches(hello)


def test_non_numeric_word_count_does_not_exclude():
    filters = Filter.from_params({"word_count": "abc"})
    records = [record("a"), record("a b"), record("a b c")]

    assert filters.apply(records) == records


def test_constraints_are_anded():
    filters = Filter(is_palindrome=True, word_count=1)

    assert filters.matches(record("noon"))
    assert not filters.matches(record("never odd or even"))
    assert not filters.matches(record("hello"))


def test_apply_preserves_order():
    records = [record(value) for value in ("zz", "a", "mm", "b")]

    assert [r.value for r in Filter(min_length=2).apply(records)] == ["zz", "mm"]


def test_empty_palindrome_value_means_false():
    filters = Filter.from_params({"is_palindrome": ""})

    assert filters.is_palindrome is False
    assert filters.matches(record("hello"))
    assert not filters.matches(record("noon"))
