import pytest
from fastapi.testclient import TestClient

from string_analyzer.config import Settings
from string_analyzer.main import create_app
from string_analyzer.storage import FlatStore, IndexedStore

SAMPLE_VALUES = [
    "racecar",
    "Racecar",
    "hello world",
    "A man a plan a canal Panama",
    "noon",
    "level up",
    "banana",
    "Abba",
    "z",
    "madam in eden im adam",
    "été",
]


def make_settings(tmp_path, backend):
    return Settings(
        storage_backend=backend,
        database_url=f"sqlite:///{tmp_path / 'strings.db'}",
        flat_store_path=str(tmp_path / "strings.json"),
    )


@pytest.fixture
def indexed_store(tmp_path):
    store = IndexedStore(f"sqlite:///{tmp_path / 'strings.db'}")
    yield store
    store.engine.dispose()


@pytest.fixture
def flat_store(tmp_path):
    return FlatStore(str(tmp_path / "strings.json"))


@pytest.fixture(params=["indexed", "flat"])
def store(request):
    """Each storage contract test runs once per backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture(params=["indexed", "flat"])
def client(request, tmp_path):
    app = create_app(make_settings(tmp_path, request.param))
    with TestClient(app) as client:
        yield client
