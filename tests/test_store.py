from __future__ import annotations

import json
from pathlib import Path

import pytest

from moviescript.models import Dialogue, Document, NotFoundError, StorageFailure
from moviescript.store import STORAGE_KEY, DocumentStore, JsonStorage


def _doc(doc_id: str, title: str) -> Document:
    return Document(
        id=doc_id,
        title=title,
        scenario="Somewhere.",
        characters=["Ava"],
        dialogues=[Dialogue("Ava", "Hi")],
        last_modified="2024-05-01T12:00:00.000Z",
    )


def test_missing_or_empty_collection_is_empty(tmp_path: Path) -> None:
    storage = JsonStorage(tmp_path)
    store = DocumentStore(storage)
    assert store.list() == []

    storage.set(STORAGE_KEY, "")
    assert store.list() == []


def test_upsert_appends_then_replaces_in_place(tmp_path: Path) -> None:
    store = DocumentStore(JsonStorage(tmp_path))
    store.upsert(_doc("1", "First"))
    store.upsert(_doc("2", "Second"))
    store.upsert(_doc("1", "First, revised"))

    titles = [doc.title for doc in store.list()]
    assert titles == ["First, revised", "Second"]
    assert store.get("1").title == "First, revised"


def test_stored_layout_uses_movie_scripts_keys(tmp_path: Path) -> None:
    store = DocumentStore(JsonStorage(tmp_path))
    store.upsert(_doc("42", "My Film"))

    raw = json.loads((tmp_path / f"{STORAGE_KEY}.json").read_text(encoding="utf-8"))
    assert raw == [
        {
            "id": "42",
            "movieName": "My Film",
            "scenario": "Somewhere.",
            "characters": ["Ava"],
            "dialogues": [{"character": "Ava", "text": "Hi"}],
            "lastModified": "2024-05-01T12:00:00.000Z",
        }
    ]


def test_delete_removes_and_ignores_unknown_ids(tmp_path: Path) -> None:
    store = DocumentStore(JsonStorage(tmp_path))
    store.upsert(_doc("1", "First"))
    store.upsert(_doc("2", "Second"))

    assert store.delete("1") is True
    assert store.delete("missing") is False
    assert [doc.id for doc in store.list()] == ["2"]


def test_get_unknown_id_raises_not_found(tmp_path: Path) -> None:
    store = DocumentStore(JsonStorage(tmp_path))
    with pytest.raises(NotFoundError):
        store.get("nope")


def test_new_id_skips_ids_in_use(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("moviescript.store.time.time", lambda: 1700000000.0)
    store = DocumentStore(JsonStorage(tmp_path))
    store.upsert(_doc("1700000000000", "Taken"))

    assert store.new_id() == "1700000000001"


def test_corrupt_collection_raises_storage_failure(tmp_path: Path) -> None:
    storage = JsonStorage(tmp_path)
    storage.set(STORAGE_KEY, "{not json")
    with pytest.raises(StorageFailure):
        DocumentStore(storage).list()

    storage.set(STORAGE_KEY, '{"id": "1"}')
    with pytest.raises(StorageFailure):
        DocumentStore(storage).list()


def test_write_failure_raises_storage_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("a file where a directory should be")
    store = DocumentStore(JsonStorage(blocker / "data"))
    with pytest.raises(StorageFailure):
        store.upsert(_doc("1", "First"))


def test_document_from_dict_tolerates_missing_lists() -> None:
    doc = Document.from_dict({"id": "7", "movieName": "Bare", "scenario": "x"})
    assert doc.characters == []
    assert doc.dialogues == []
    assert doc.last_modified is None
