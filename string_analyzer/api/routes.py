from fastapi import APIRouter, Depends, Query, Request, status
from typing import Optional
import logging

from string_analyzer.filters import Filter
from string_analyzer.schemas.string import (
    InterpretedQuery,
    NaturalLanguageResponse,
    StringCreate,
    StringListResponse,
    StringRecord,
)
from string_analyzer.services.nl_parser import interpret_query
from string_analyzer.storage import StorageBackend

router = APIRouter()
logger = logging.getLogger(__name__)


def get_storage(request: Request) -> StorageBackend:
    """Dependency to provide the backend selected at startup."""
    return request.app.state.storage


@router.post("/strings", response_model=StringRecord, status_code=status.HTTP_201_CREATED)
def create_string(string_data: StringCreate, storage: StorageBackend = Depends(get_storage)):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    return storage.create(string_data.value)


@router.get("/strings", response_model=StringListResponse)
def get_all_strings(
    is_palindrome: Optional[str] = Query(None, description="Filter by palindrome (true/false)"),
    min_length: Optional[str] = Query(None, description="Minimum string length (inclusive)"),
    max_length: Optional[str] = Query(None, description="Maximum string length (inclusive)"),
    word_count: Optional[str] = Query(None, description="Exact word count"),
    contains_character: Optional[str] = Query(None, description="Substring the value must contain"),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Get all strings with optional filtering.
    Values that cannot be interpreted are ignored rather than rejected.
    """
    filters = Filter.from_params(
        {
            "is_palindrome": is_palindrome,
            "min_length": min_length,
            "max_length": max_length,
            "word_count": word_count,
            "contains_character": contains_character,
        }
    )
    strings = storage.list(filters)
    return StringListResponse(data=strings, count=len(strings), filters_applied=filters.as_dict())


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: str = Query(..., description="Natural language query"),
    storage: StorageBackend = Depends(get_storage),
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    filters = interpret_query(query)
    logger.info(f"Interpreted {query!r} as {filters.as_dict()}")

    strings = storage.list(filters)
    return NaturalLanguageResponse(
        data=strings,
        count=len(strings),
        interpreted_query=InterpretedQuery(original=query, parsed_filters=filters.as_dict()),
    )


@router.get("/strings/{string_value}", response_model=StringRecord)
def get_string(string_value: str, storage: StorageBackend = Depends(get_storage)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    return storage.get(string_value)


@router.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, storage: StorageBackend = Depends(get_storage)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    storage.delete(string_value)
    return None
