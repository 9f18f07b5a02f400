"""Local persistence for saved scripts."""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, List, Optional

from .models import Document, NotFoundError, StorageFailure


logger = logging.getLogger(__name__)

STORAGE_KEY = "movieScripts"


class JsonStorage:
    """Key-value storage where every key is one JSON file in a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Return the raw stored value, or None when the key was never set."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageFailure(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str):
        """Replace the stored value in a single write."""
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageFailure(f"Could not write {path}: {e}") from e

    def get_json(self, key: str, default: Any = None) -> Any:
        raw = self.get(key)
        if raw is None or not raw.strip():
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageFailure(f"Stored value for '{key}' is not valid JSON: {e}") from e

    def set_json(self, key: str, value: Any):
        self.set(key, json.dumps(value, indent=2))


class DocumentStore:
    """The saved scripts collection, kept in storage order."""

    def __init__(self, storage: JsonStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    def _load(self) -> List[Document]:
        records = self.storage.get_json(self.key, default=[])
        if not isinstance(records, list):
            raise StorageFailure(f"Stored value for '{self.key}' is not a list")
        return [Document.from_dict(record) for record in records]

    def _save(self, documents: List[Document]):
        self.storage.set_json(self.key, [doc.to_dict() for doc in documents])

    def list(self) -> List[Document]:
        return self._load()

    def get(self, doc_id: str) -> Document:
        for doc in self._load():
            if doc.id == doc_id:
                return doc
        raise NotFoundError(f"Script '{doc_id}' not found")

    def upsert(self, doc: Document):
        """Replace the document with the same id in place, or append it."""
        documents = self._load()
        for index, existing in enumerate(documents):
            if existing.id == doc.id:
                documents[index] = doc
                logger.info("Updated script %s", doc.id)
                break
        else:
            documents.append(doc)
            logger.info("Added script %s", doc.id)
        self._save(documents)

    def delete(self, doc_id: str) -> bool:
        documents = self._load()
        remaining = [doc for doc in documents if doc.id != doc_id]
        if len(remaining) == len(documents):
            logger.debug("Delete of unknown script %s ignored", doc_id)
            return False
        self._save(remaining)
        logger.info("Deleted script %s", doc_id)
        return True

    def new_id(self) -> str:
        """Millisecond timestamp id, bumped until unused."""
        taken = {doc.id for doc in self._load()}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)
