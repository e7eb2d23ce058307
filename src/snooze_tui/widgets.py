from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widgets import ListItem, Static
from rich.text import Text

from .datamodels import Story

STAR_ON = "★"
STAR_OFF = "☆"


# --- UI Widgets ---
class StoryItem(ListItem):
    def __init__(self, story: Story, starred: bool = False, show_star: bool = False, deletable: bool = False):
        super().__init__()
        self.story = story
        self.starred = starred
        self.show_star = show_star
        self.deletable = deletable

    def compose(self) -> ComposeResult:
        with Horizontal(classes="story-container"):
            if self.deletable:
                yield Static("✗", classes="story-delete")
            if self.show_star:
                yield Static(STAR_ON if self.starred else STAR_OFF, classes="story-star")
            yield Static(self.story.title, classes="story-title")
            hostname = self.story.display_hostname()
            if hostname:
                yield Static(f"({hostname})", classes="story-hostname")
            yield Static(f"by {self.story.author}", classes="story-author")
            yield Static(f"posted by {self.story.username}", classes="story-user")


class StatusBar(Static):
    loading_status = reactive("")
    keybinding_hint = reactive("")
    user_status = reactive("")

    def on_mount(self) -> None:
        self.update_display()

    def set_keybindings(self, hint: str) -> None:
        """Set the keybinding hint text."""
        self.keybinding_hint = hint

    def update_display(self) -> None:
        """Update the status bar display."""
        status_items = []
        if self.user_status:
            status_items.append(self.user_status)

        if self.loading_status:
            status_items.append(self.loading_status)

        if self.keybinding_hint:
            status_items.append(self.keybinding_hint)

        self.update(" | ".join(status_items))

    def watch_loading_status(self, loading_status: str) -> None:
        self.update_display()

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update_display()

    def watch_user_status(self, user_status: str) -> None:
        self.update_display()


class EmptyMessage(Static):
    def __init__(self, message: str):
        super().__init__(Text(message, style="italic"))


class ErrorMessage(Static):
    def __init__(self, message: str):
        super().__init__(Text(message, style="bold red"))
