from __future__ import annotations

from rich.console import Group

from moviescript.preview import PLACEHOLDER, as_renderable, render
from moviescript.session import EditorSession


def test_empty_session_shows_placeholder_and_disables_export() -> None:
    preview = render(EditorSession())

    assert [(b.kind, b.text) for b in preview.blocks] == [("placeholder", PLACEHOLDER)]
    assert preview.exportable is False


def test_sections_render_in_fixed_order() -> None:
    session = EditorSession()
    session.title = "My Film"
    session.scenario = "Line one\nLine two"
    session.set_character_count(3)
    session.set_character_name(0, "Ava")
    session.set_character_name(2, "Ben")
    session.add_dialogue_entry(0, "Hi")
    session.add_dialogue_entry(2, "   ")
    session.add_dialogue_entry(2, "Hey\nthere")

    preview = render(session)
    kinds = [block.kind for block in preview.blocks]

    assert preview.exportable is True
    assert kinds == [
        "title",
        "heading", "text", "rule",
        "heading", "list_item", "list_item", "rule",
        "heading", "dialogue", "dialogue",
    ]
    assert preview.blocks[2].lines == ["Line one", "Line two"]
    assert [b.text for b in preview.blocks if b.kind == "list_item"] == ["Ava", "Ben"]
    dialogues = [b for b in preview.blocks if b.kind == "dialogue"]
    assert [(b.speaker, b.lines) for b in dialogues] == [("Ava", ["Hi"]), ("Ben", ["Hey", "there"])]


def test_blank_characters_and_dialogue_skip_their_sections() -> None:
    session = EditorSession()
    session.scenario = "Only a scenario"
    session.set_character_count(2)
    session.add_dialogue_entry(0)

    kinds = [block.kind for block in render(session).blocks]
    assert kinds == ["heading", "text", "rule"]


def test_preview_follows_renamed_slot_but_not_captured_dialogue() -> None:
    session = EditorSession()
    session.set_character_count(1)
    session.set_character_name(0, "Ava")
    session.add_dialogue_entry(0, "Hi")
    session.set_character_name(0, "Eva")

    blocks = render(session).blocks
    assert [b.text for b in blocks if b.kind == "list_item"] == ["Eva"]
    assert [b.speaker for b in blocks if b.kind == "dialogue"] == ["Ava"]


def test_as_renderable_builds_one_part_per_block() -> None:
    session = EditorSession()
    session.title = "My Film"
    group = as_renderable(render(session))

    assert isinstance(group, Group)
    assert len(group.renderables) == 2
