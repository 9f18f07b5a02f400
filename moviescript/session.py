"""Editable form state for one editing session.

The session mirrors what the user sees in the form: a title, a scenario,
a fixed number of character name slots and a free list of dialogue
entries. Dialogue entries copy the character name at the moment they are
created; later edits to the character slot do not touch existing entries.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .models import Dialogue, Document, NotFoundError, ValidationError


logger = logging.getLogger(__name__)


@dataclass
class DialogueEntry:
    entry_id: int
    character_name: str
    text: str = ""


class EditorSession:
    """Form fields of the script being edited, plus the id of a loaded script."""

    def __init__(self):
        # Entry ids keep counting across resets so a stale id never hits a new entry.
        self._next_entry_id = 1
        self.reset()

    def reset(self):
        """Clear every field and forget the loaded script."""
        self.document_id: Optional[str] = None
        self.title = ""
        self.scenario = ""
        self.character_slots: List[str] = []
        self.dialogue_entries: List[DialogueEntry] = []

    # Characters

    def set_character_count(self, count: int):
        """Regenerate `count` blank character slots, dropping previous names."""
        if count < 0:
            raise ValidationError("Number of characters cannot be negative")
        self.character_slots = [""] * count

    def set_character_name(self, index: int, name: str):
        self._check_slot(index)
        self.character_slots[index] = name

    def character_label(self, index: int) -> str:
        self._check_slot(index)
        return self.character_slots[index] or f"Character {index + 1}"

    def dialogue_actions(self) -> List[str]:
        """One "add dialogue" label per character slot."""
        return [f"Add {self.character_label(i)} Dialogue" for i in range(len(self.character_slots))]

    def _check_slot(self, index: int):
        if not 0 <= index < len(self.character_slots):
            raise ValidationError(f"There is no character {index + 1}")

    # Dialogues

    def add_dialogue_entry(self, character_index: int, text: str = "") -> DialogueEntry:
        entry = DialogueEntry(self._next_entry_id, self.character_label(character_index), text)
        self._next_entry_id += 1
        self.dialogue_entries.append(entry)
        return entry

    def find_entry(self, entry_id: int) -> DialogueEntry:
        for entry in self.dialogue_entries:
            if entry.entry_id == entry_id:
                return entry
        raise NotFoundError(f"Dialogue entry {entry_id} not found")

    def set_dialogue_text(self, entry_id: int, text: str):
        self.find_entry(entry_id).text = text

    def remove_dialogue_entry(self, entry_id: int):
        self.dialogue_entries.remove(self.find_entry(entry_id))

    # Document conversion

    def hydrate(self, doc: Document):
        """Load a saved script into the form.

        Dialogues are matched back to slots by character name, first match
        wins. A dialogue whose character no longer has a slot is dropped.
        """
        self.reset()
        self.document_id = doc.id
        self.title = doc.title
        self.scenario = doc.scenario
        self.set_character_count(len(doc.characters))
        for index, name in enumerate(doc.characters):
            self.character_slots[index] = name

        for dialogue in doc.dialogues:
            try:
                index = self.character_slots.index(dialogue.character_name)
            except ValueError:
                logger.debug(
                    "Dropping dialogue for unknown character %r in script %s",
                    dialogue.character_name, doc.id,
                )
                continue
            self.add_dialogue_entry(index, dialogue.text)

    def draft(self) -> Document:
        """Current fields as a document, blank characters and dialogues removed."""
        return Document(
            id=self.document_id,
            title=self.title.strip(),
            scenario=self.scenario.strip(),
            characters=[name.strip() for name in self.character_slots if name.strip()],
            dialogues=[
                Dialogue(entry.character_name, entry.text.strip())
                for entry in self.dialogue_entries
                if entry.text.strip()
            ],
        )

    def harvest(self) -> Document:
        """Like draft(), but refuses a script without title or scenario."""
        doc = self.draft()
        missing = [label for label, value in (("Movie Name", doc.title), ("Scenario", doc.scenario)) if not value]
        if missing:
            raise ValidationError(f"Please fill in all required fields: {' and '.join(missing)}")
        return doc
