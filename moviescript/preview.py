"""Live preview of the script being edited."""

from dataclasses import dataclass
from typing import List, Optional

from rich.console import Group
from rich.rule import Rule
from rich.text import Text

from .session import EditorSession


PLACEHOLDER = "Your script preview will appear here..."


@dataclass(frozen=True)
class PreviewBlock:
    kind: str  # title, heading, text, list_item, dialogue, rule, placeholder
    text: str = ""
    speaker: Optional[str] = None

    @property
    def lines(self) -> List[str]:
        return self.text.split("\n")


@dataclass(frozen=True)
class Preview:
    blocks: List[PreviewBlock]
    exportable: bool


def render(session: EditorSession) -> Preview:
    """Build preview blocks from the current form fields."""
    blocks = []

    if session.title:
        blocks.append(PreviewBlock("title", session.title))

    if session.scenario:
        blocks.append(PreviewBlock("heading", "Scenario"))
        blocks.append(PreviewBlock("text", session.scenario))
        blocks.append(PreviewBlock("rule"))

    names = [name for name in session.character_slots if name.strip()]
    if names:
        blocks.append(PreviewBlock("heading", "Characters"))
        blocks.extend(PreviewBlock("list_item", name) for name in names)
        blocks.append(PreviewBlock("rule"))

    spoken = [entry for entry in session.dialogue_entries if entry.text.strip()]
    if spoken:
        blocks.append(PreviewBlock("heading", "Dialogues"))
        blocks.extend(PreviewBlock("dialogue", entry.text, speaker=entry.character_name) for entry in spoken)

    if not blocks:
        return Preview([PreviewBlock("placeholder", PLACEHOLDER)], exportable=False)
    return Preview(blocks, exportable=True)


def as_renderable(preview: Preview) -> Group:
    """Turn preview blocks into something a Static widget can display."""
    parts = []
    for block in preview.blocks:
        if block.kind == "title":
            parts.append(Text(block.text, style="bold", justify="center"))
            parts.append(Text(""))
        elif block.kind == "heading":
            parts.append(Text(block.text, style="bold underline"))
        elif block.kind == "text":
            parts.append(Text(block.text))
        elif block.kind == "list_item":
            parts.append(Text(f"  • {block.text}"))
        elif block.kind == "dialogue":
            line = Text()
            line.append(f"{block.speaker}: ", style="bold")
            line.append(block.text)
            parts.append(line)
        elif block.kind == "rule":
            parts.append(Rule(style="dim"))
        else:
            parts.append(Text(block.text, style="dim italic"))
    return Group(*parts)
