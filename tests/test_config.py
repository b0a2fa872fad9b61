"""Tests for the dotted-key configuration repository."""

import pytest
from pydantic import BaseModel

from wirebox.config import Repository


class DatabaseConfig(BaseModel):
    host: str = "localhost"
    port: int = 5432


class AppConfig(BaseModel):
    debug: bool = False
    db: DatabaseConfig = DatabaseConfig()


@pytest.fixture()
def repository() -> Repository:
    return Repository({"db": {"host": "localhost", "port": 5432}, "debug": True})


def test_get_reads_nested_values(repository: Repository) -> None:
    assert repository.get("db.host") == "localhost"
    assert repository.get("db") == {"host": "localhost", "port": 5432}
    assert repository.get("db.user", "root") == "root"
    assert repository.get("debug.nested") is None


def test_set_creates_intermediate_mappings() -> None:
    repository = Repository()

    repository.set("cache.redis.url", "redis://")

    assert repository.all() == {"cache": {"redis": {"url": "redis://"}}}


def test_has_and_forget(repository: Repository) -> None:
    assert repository.has("db.port")

    repository.forget("db.port")

    assert not repository.has("db.port")
    assert repository.has("db.host")
    repository.forget("missing.key")


def test_merge_is_deep_and_incoming_values_win(repository: Repository) -> None:
    repository.merge({"db": {"port": 6543, "user": "app"}, "name": "wirebox"})

    assert repository.get("db") == {"host": "localhost", "port": 6543, "user": "app"}
    assert repository.get("name") == "wirebox"


def test_merge_accepts_repository(repository: Repository) -> None:
    repository.merge(Repository({"debug": False}))

    assert repository.get("debug") is False


def test_merge_does_not_alias_source_mappings() -> None:
    source = {"db": {"host": "a"}}
    repository = Repository(source)

    repository.set("db.host", "b")

    assert source == {"db": {"host": "a"}}


def test_mapping_protocol(repository: Repository) -> None:
    repository["db.user"] = "app"

    assert repository["db.user"] == "app"
    assert "db.user" in repository
    assert 1 not in repository
    assert set(repository) == {"db", "debug"}
    assert len(repository) == 2

    del repository["db.user"]

    with pytest.raises(KeyError):
        repository["db.user"]
    with pytest.raises(KeyError):
        del repository["db.user"]


def test_from_settings_model() -> None:
    repository = Repository.from_settings(AppConfig(debug=True))

    assert repository.get("debug") is True
    assert repository.get("db.port") == 5432
