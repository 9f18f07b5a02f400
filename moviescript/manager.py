"""What the UI can do with a script: save, load, delete, reset, export."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .export import Wrap, reportlab_wrap, write_pdf
from .models import Document
from .preview import Preview, render
from .session import EditorSession
from .store import DocumentStore


logger = logging.getLogger(__name__)


def timestamp() -> str:
    """UTC now, millisecond precision, trailing Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ScriptManager:
    """Ties the editing session to the saved scripts collection."""

    def __init__(
        self,
        store: DocumentStore,
        export_dir: Path,
        session: Optional[EditorSession] = None,
        wrap: Wrap = reportlab_wrap,
    ):
        self.store = store
        self.export_dir = Path(export_dir)
        self.session = session if session is not None else EditorSession()
        self.wrap = wrap

    def documents(self) -> List[Document]:
        return self.store.list()

    def preview(self) -> Preview:
        return render(self.session)

    def save(self) -> Document:
        """Store the form as a script and clear the form.

        Raises ValidationError before anything is written, and leaves the
        form untouched if the store cannot be written.
        """
        doc = self.session.harvest()
        doc.id = self.session.document_id or self.store.new_id()
        doc.last_modified = timestamp()
        self.store.upsert(doc)
        logger.info("Saved script %s (%s)", doc.id, doc.title)
        self.session.reset()
        return doc

    def load(self, doc_id: str) -> Document:
        doc = self.store.get(doc_id)
        self.session.hydrate(doc)
        logger.debug("Loaded script %s into the editor", doc_id)
        return doc

    def delete(self, doc_id: str) -> bool:
        removed = self.store.delete(doc_id)
        if self.session.document_id == doc_id:
            self.session.reset()
        return removed

    def reset(self):
        self.session.reset()

    def export_session(self, directory: Optional[Path] = None) -> Path:
        return write_pdf(self.session.draft(), directory or self.export_dir, self.wrap)

    def export_document(self, doc_id: str, directory: Optional[Path] = None) -> Path:
        return write_pdf(self.store.get(doc_id), directory or self.export_dir, self.wrap)
