#!/usr/bin/env python3
"""
moviescript - a terminal form for writing short movie scripts
with a live preview, local saves and PDF export.
"""

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, ListItem, ListView, Static, TextArea

from .manager import ScriptManager
from .models import ScriptError
from .preview import as_renderable
from .session import DialogueEntry
from .store import DocumentStore, JsonStorage


# Configuration
DATA_DIR = Path.home() / ".moviescript"
LOG_FILE_NAME = "moviescript.log"
DEFAULT_EXPORT_DIR = Path.home() / "Documents" / "Scripts"


logger = logging.getLogger(__name__)


def format_last_modified(value: Optional[str]) -> str:
    if not value:
        return "Never"
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return "Unknown"
    return dt.astimezone().strftime("%Y-%m-%d %H:%M")


class ConfirmDeletionScreen(Screen):
    """Confirmation screen shown before a saved script is deleted."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes, Delete"),
        Binding("n", "cancel", "No, Cancel"),
    ]

    def __init__(self, script_title: str):
        super().__init__()
        self.script_title = script_title

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Static("# Delete Script\n"),
            Static(f"Are you sure you want to delete '{self.script_title}'?\n", markup=False),
            Static("Press Y to delete"),
            Static("Press N or Escape to cancel"),
            id="confirm_form"
        )
        yield Footer()

    def action_confirm(self):
        self.dismiss(True)

    def action_cancel(self):
        self.dismiss(False)


class HelpScreen(Screen):
    """Help screen listing the editor shortcuts."""

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("q", "close", "Close"),
    ]

    def compose(self) -> ComposeResult:
        help_text = """
# moviescript - Help

## Writing
- Fill in **Movie Name** and **Scenario** (both required to save)
- Enter the number of characters and press **Generate**
  (this clears the character names you had)
- Name each character, then use **Add <name> Dialogue** to add lines
- Dialogue keeps the character name it was added with

## Shortcuts
- **Ctrl+S**: Save script
- **Ctrl+E**: Export PDF
- **Ctrl+R**: Reset the form
- **Ctrl+D**: Delete the highlighted saved script
- **Ctrl+Q**: Quit
- **F1**: This help

## Saved Scripts
Select a script in the right-hand list to load it for editing.
Saving a loaded script updates it in place.
"""
        yield Header()
        yield Static(help_text, id="help_content")
        yield Footer()

    def action_close(self):
        self.app.pop_screen()


class EditorScreen(Screen):
    """Script form, live preview and saved scripts side by side."""

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("ctrl+e", "export", "Export PDF", priority=True),
        Binding("ctrl+r", "reset", "Reset", priority=True),
        Binding("ctrl+d", "delete_script", "Delete", priority=True),
        Binding("f1", "show_help", "Help"),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, manager: ScriptManager):
        super().__init__()
        self.manager = manager
        self.session = manager.session
        self.generation = 0
        self.character_buttons: List[Button] = []
        self.entry_widgets: Dict[int, Vertical] = {}

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with VerticalScroll(id="form"):
                yield Static("Movie Name", classes="label")
                yield Input(placeholder="My Film", id="title")
                yield Static("Scenario", classes="label")
                yield TextArea(id="scenario")
                yield Static("Number of Characters", classes="label")
                with Horizontal(id="count_row"):
                    yield Input(value="0", type="integer", id="character_count")
                    yield Button("Generate", id="generate")
                yield Vertical(id="character_fields")
                yield Vertical(id="character_buttons")
                yield Vertical(id="dialogue_section")
            with Vertical(id="preview_panel"):
                yield Static("# Preview", id="preview_title")
                with VerticalScroll():
                    yield Static("", id="preview")
                yield Button("Download PDF", variant="primary", id="export", disabled=True)
            with Vertical(id="saved_panel"):
                yield Static("# Saved Scripts", id="saved_title")
                yield ListView(id="saved_list")
        yield Footer()

    def on_mount(self):
        self.sync_form()
        self.refresh_saved_list()

    # Form <-> session

    def sync_form(self):
        """Rebuild every field from the session (after load, save or reset)."""
        self.generation += 1
        self.query_one("#title", Input).value = self.session.title
        self.query_one("#scenario", TextArea).text = self.session.scenario
        self.query_one("#character_count", Input).value = str(len(self.session.character_slots))
        self.rebuild_character_fields()
        self.rebuild_dialogue_section()
        self.refresh_preview()

    def rebuild_character_fields(self):
        fields = self.query_one("#character_fields", Vertical)
        fields.remove_children()
        inputs = []
        for index, name in enumerate(self.session.character_slots):
            field = Input(value=name, placeholder=f"Character {index + 1} Name", classes="character-name")
            field.slot_index = index
            field.generation = self.generation
            inputs.append(field)
        if inputs:
            fields.mount(*inputs)
        self.rebuild_character_buttons()

    def rebuild_character_buttons(self):
        container = self.query_one("#character_buttons", Vertical)
        container.remove_children()
        self.character_buttons = []
        for index, label in enumerate(self.session.dialogue_actions()):
            button = Button(Text(label), classes="character-btn")
            button.character_index = index
            self.character_buttons.append(button)
        if self.character_buttons:
            container.mount(*self.character_buttons)

    def refresh_character_buttons(self):
        for button, label in zip(self.character_buttons, self.session.dialogue_actions()):
            button.label = Text(label)

    def make_entry_widget(self, entry: DialogueEntry) -> Vertical:
        text_area = TextArea(entry.text, classes="dialogue-text")
        text_area.entry_id = entry.entry_id
        remove = Button("Remove", variant="error", classes="remove-dialogue")
        remove.entry_id = entry.entry_id
        widget = Vertical(
            Static(f"{entry.character_name}:", classes="speaker", markup=False),
            text_area,
            remove,
            classes="dialogue-entry",
        )
        self.entry_widgets[entry.entry_id] = widget
        return widget

    def rebuild_dialogue_section(self):
        section = self.query_one("#dialogue_section", Vertical)
        section.remove_children()
        self.entry_widgets = {}
        widgets = [self.make_entry_widget(entry) for entry in self.session.dialogue_entries]
        if widgets:
            section.mount(*widgets)

    def refresh_preview(self):
        preview = self.manager.preview()
        self.query_one("#preview", Static).update(as_renderable(preview))
        self.query_one("#export", Button).disabled = not preview.exportable

    def refresh_saved_list(self):
        saved_list = self.query_one("#saved_list", ListView)
        saved_list.clear()
        try:
            documents = self.manager.documents()
        except ScriptError as e:
            self.notify(f"Error loading saved scripts: {e}", severity="error")
            return

        if not documents:
            saved_list.append(ListItem(Static("No saved scripts yet. Create your first script!")))
            return
        for doc in documents:
            item_text = (
                f"{doc.title}\n"
                f"  Characters: {', '.join(doc.characters)}\n"
                f"  Last modified: {format_last_modified(doc.last_modified)}"
            )
            list_item = ListItem(Static(item_text, markup=False))
            list_item.document_id = doc.id
            list_item.document_title = doc.title
            saved_list.append(list_item)

    # Field events

    def on_input_changed(self, event: Input.Changed):
        field = event.input
        if field.id == "title":
            self.session.title = event.value
        elif hasattr(field, "slot_index"):
            if field.generation != self.generation:
                return
            self.session.set_character_name(field.slot_index, event.value)
            self.refresh_character_buttons()
        else:
            return
        self.refresh_preview()

    def on_text_area_changed(self, event: TextArea.Changed):
        text_area = event.text_area
        if text_area.id == "scenario":
            self.session.scenario = text_area.text
        elif hasattr(text_area, "entry_id"):
            if text_area.entry_id not in self.entry_widgets:
                return
            self.session.set_dialogue_text(text_area.entry_id, text_area.text)
        else:
            return
        self.refresh_preview()

    def on_button_pressed(self, event: Button.Pressed):
        button = event.button
        if button.id == "generate":
            self.generate_character_fields()
        elif button.id == "export":
            self.action_export()
        elif hasattr(button, "character_index"):
            self.add_dialogue(button.character_index)
        elif hasattr(button, "entry_id"):
            self.remove_dialogue(button.entry_id)

    def on_list_view_selected(self, event: ListView.Selected):
        if hasattr(event.item, "document_id"):
            self.load_script(event.item.document_id)

    # Form actions

    def generate_character_fields(self):
        raw = self.query_one("#character_count", Input).value.strip()
        try:
            self.session.set_character_count(int(raw or 0))
        except ValueError:
            self.notify("Enter a whole number of characters", severity="error")
            return
        except ScriptError as e:
            self.notify(str(e), severity="error")
            return
        self.generation += 1
        self.rebuild_character_fields()
        self.refresh_preview()

    def add_dialogue(self, character_index: int):
        entry = self.session.add_dialogue_entry(character_index)
        self.query_one("#dialogue_section", Vertical).mount(self.make_entry_widget(entry))
        self.refresh_preview()

    def remove_dialogue(self, entry_id: int):
        self.session.remove_dialogue_entry(entry_id)
        widget = self.entry_widgets.pop(entry_id, None)
        if widget is not None:
            widget.remove()
        self.refresh_preview()

    def load_script(self, doc_id: str):
        try:
            doc = self.manager.load(doc_id)
        except ScriptError as e:
            self.notify(f"Could not load script: {e}", severity="error")
            self.refresh_saved_list()
            return
        self.sync_form()
        self.query_one("#form", VerticalScroll).scroll_home(animate=False)
        self.notify(f"Editing '{doc.title}'")

    def action_save(self):
        try:
            doc = self.manager.save()
        except ScriptError as e:
            self.notify(str(e), severity="error")
            return
        self.sync_form()
        self.refresh_saved_list()
        self.notify(f"Script '{doc.title}' saved successfully!")

    def action_export(self):
        if not self.manager.preview().exportable:
            self.notify("Nothing to export yet", severity="warning")
            return
        try:
            path = self.manager.export_session()
        except ScriptError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return
        self.notify(f"Exported PDF to: {path}")

    def action_reset(self):
        self.manager.reset()
        self.sync_form()

    def action_delete_script(self):
        saved_list = self.query_one("#saved_list", ListView)
        item = saved_list.highlighted_child
        if item is None or not hasattr(item, "document_id"):
            self.notify("No script selected", severity="warning")
            return
        doc_id = item.document_id

        def on_confirm(confirmed):
            if confirmed:
                self.delete_script(doc_id)

        self.app.push_screen(ConfirmDeletionScreen(item.document_title), on_confirm)

    def delete_script(self, doc_id: str):
        was_loaded = self.session.document_id == doc_id
        try:
            self.manager.delete(doc_id)
        except ScriptError as e:
            self.notify(f"Error deleting script: {e}", severity="error")
            return
        if was_loaded:
            self.sync_form()
        self.refresh_saved_list()
        self.notify("Script deleted", severity="information")

    def action_show_help(self):
        self.app.push_screen(HelpScreen())

    def action_quit(self):
        self.app.exit()


class MovieScriptApp(App):
    """Main application."""

    TITLE = "moviescript"

    CSS = """
    #form {
        width: 40%;
        padding: 0 1;
    }

    #preview_panel {
        width: 35%;
        padding: 0 1;
    }

    #saved_panel {
        width: 25%;
        padding: 0 1;
    }

    .label {
        margin: 1 0 0 0;
    }

    #scenario {
        height: 8;
    }

    #count_row {
        height: auto;
    }

    #character_count {
        width: 12;
    }

    #character_fields, #character_buttons, #dialogue_section {
        height: auto;
    }

    .dialogue-entry {
        height: auto;
        border: round $primary;
        margin: 1 0 0 0;
    }

    .dialogue-text {
        height: 5;
    }

    .speaker {
        text-style: bold;
    }

    #export {
        margin: 1 0;
    }

    #confirm_form {
        margin: 4;
        padding: 2;
        text-align: center;
    }

    #help_content {
        margin: 2;
        padding: 1;
        overflow: auto;
    }
    """

    def __init__(self, manager: ScriptManager):
        super().__init__()
        self.manager = manager

    def on_mount(self):
        self.push_screen(EditorScreen(self.manager))


def build_manager(data_dir: Path, export_dir: Path) -> ScriptManager:
    store = DocumentStore(JsonStorage(data_dir))
    return ScriptManager(store, export_dir=export_dir)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="moviescript", description=__doc__.strip())
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="where saved scripts are kept")
    parser.add_argument("--export-dir", type=Path, default=DEFAULT_EXPORT_DIR, help="where PDFs are written")
    args = parser.parse_args(argv)

    args.data_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(args.data_dir / LOG_FILE_NAME),
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting with data dir %s", args.data_dir)

    app = MovieScriptApp(build_manager(args.data_dir, args.export_dir))
    app.run()


if __name__ == "__main__":
    main()
