"""Script documents as they are stored, and the errors raised around them."""

from dataclasses import dataclass, field
from typing import List, Optional


class ScriptError(Exception):
    """Base class for errors reported back to the user."""


class ValidationError(ScriptError):
    """Required fields are missing."""


class NotFoundError(ScriptError, LookupError):
    """No saved script with that id."""


class StorageFailure(ScriptError):
    """The storage medium could not be read or written."""


class LayoutFailure(ScriptError):
    """Text could not be laid out for export."""


@dataclass
class Dialogue:
    character_name: str
    text: str

    def to_dict(self) -> dict:
        return {"character": self.character_name, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> "Dialogue":
        return cls(character_name=data.get("character", ""), text=data.get("text", ""))


@dataclass
class Document:
    """One saved movie script."""

    title: str
    scenario: str
    characters: List[str] = field(default_factory=list)
    dialogues: List[Dialogue] = field(default_factory=list)
    id: Optional[str] = None
    last_modified: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "movieName": self.title,
            "scenario": self.scenario,
            "characters": list(self.characters),
            "dialogues": [dialogue.to_dict() for dialogue in self.dialogues],
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        return cls(
            id=data.get("id"),
            title=data.get("movieName", ""),
            scenario=data.get("scenario", ""),
            characters=list(data.get("characters") or []),
            dialogues=[Dialogue.from_dict(d) for d in data.get("dialogues") or []],
            last_modified=data.get("lastModified"),
        )
