from __future__ import annotations

import logging
import webbrowser
from typing import Any, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.worker import Worker, WorkerState
from textual.widgets import Header, ListView, LoadingIndicator, Static

from .api import ApiClient
from .config import DEFAULT_BASE_URL, HTTP_TIMEOUT, UI_DEFAULTS
from .datamodels import Story
from .errors import ApiError
from .screens import ErrorScreen, LoginScreen, SubmitStoryScreen
from .session import Session
from .widgets import EmptyMessage, ErrorMessage, StatusBar, StoryItem

logger = logging.getLogger("snooze")

VIEW_TITLES = {
    "all": "All stories",
    "favorites": "Favorites",
    "mine": "My stories",
}

APP_WORKERS = {"startup", "refresh", "toggle_favorite", "delete_story"}

EMPTY_MESSAGES = {
    "all": "No stories yet.",
    "favorites": "No favorites added!",
    "mine": "No stories added by user yet!",
}


class SnoozeApp(App):
    TITLE = "Hack or Snooze"
    SUB_TITLE = "Post and favorite links"

    CSS = """
    #stories-list { height: 1fr; }
    .story-container { height: auto; }
    .story-star { width: 2; color: $warning; }
    .story-delete { width: 2; color: $error; }
    .story-title { width: auto; text-style: bold; margin-right: 1; }
    .story-hostname, .story-author, .story-user { width: auto; color: $secondary; margin-right: 1; }
    .pane-title { text-style: bold; padding: 0 1; }
    .form { border: round $accent; padding: 1 2; height: auto; }
    .form-title { text-style: bold; }
    .form-error { color: $error; padding: 0 2; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("a", "show_view('all')", "All"),
        Binding("f", "show_view('favorites')", "Favorites"),
        Binding("m", "show_view('mine')", "My stories"),
        Binding("s", "submit_story", "Submit"),
        Binding("l", "login", "Login"),
        Binding("x", "logout", "Logout"),
        Binding("space", "toggle_favorite", "Star"),
        Binding("d", "delete_story", "Delete"),
        Binding("o", "open_in_browser", "Open"),
    ]

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        session: Optional[Session] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.config = config or {}
        if session is None:
            api = ApiClient(
                base_url=self.config.get("base_url", DEFAULT_BASE_URL),
                timeout=self.config.get("timeout", HTTP_TIMEOUT),
            )
            session = Session(api, remember_login=self.config.get("remember_login", True))
        self.session = session
        self.current_view = "all"

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main"):
            yield Static(VIEW_TITLES["all"], id="view-title", classes="pane-title")
            yield ListView(id="stories-list")
        yield StatusBar()

    def on_mount(self) -> None:
        keybindings_text = self.config.get("ui", {}).get(
            "statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"]
        )
        self.query_one(StatusBar).set_keybindings(keybindings_text.format(color="cyan"))
        self._start_loading("Loading stories...")
        self.run_worker(self.session.start, name="startup", thread=True, exit_on_error=False)

    def on_unmount(self) -> None:
        self.session.api.close()

    # --- Worker handling ---
    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        name = getattr(event.worker, "name", None)
        # login/submit workers belong to their screens
        if name not in APP_WORKERS:
            return
        if event.state is WorkerState.SUCCESS:
            self._handle_worker_success(name)
        elif event.state is WorkerState.ERROR:
            self._handle_worker_error(name, event.worker.error)

    def _handle_worker_success(self, name: Optional[str]) -> None:
        status = self.query_one(StatusBar)
        status.loading_status = ""
        if name == "delete_story":
            self.notify("Story deleted.")
        self._update_user_status()
        self.render_stories()

    def _handle_worker_error(self, name: Optional[str], error: Optional[BaseException]) -> None:
        logger.error("Worker %s failed: %s", name, error)
        message = error.message if isinstance(error, ApiError) else str(error)
        self.query_one(StatusBar).loading_status = f"Error: {message}"
        if name == "startup":
            self.push_screen(
                ErrorScreen(
                    "Could not load stories",
                    f"The stories API at `{self.session.api.base_url}` failed: {message}",
                )
            )
            return
        self.notify(message, severity="error")
        self.render_stories()
        if name == "refresh":
            self.query_one("#stories-list", ListView).mount(
                ErrorMessage(f"Failed to load stories: {message}")
            )

    def _start_loading(self, text: str) -> None:
        self.query_one(StatusBar).loading_status = text
        stories_list = self.query_one("#stories-list", ListView)
        stories_list.clear()
        stories_list.mount(LoadingIndicator())

    # --- Rendering ---
    def _stories_for_view(self) -> List[Story]:
        if self.current_view == "favorites":
            return self.session.favorites()
        if self.current_view == "mine":
            return self.session.own_stories()
        return self.session.all_stories()

    def render_stories(self) -> None:
        self.query_one("#view-title", Static).update(VIEW_TITLES[self.current_view])
        stories_list = self.query_one("#stories-list", ListView)
        try:
            stories_list.query_one(LoadingIndicator).remove()
        except Exception:
            pass
        stories_list.clear()

        stories = self._stories_for_view()
        if not stories:
            stories_list.mount(EmptyMessage(EMPTY_MESSAGES[self.current_view]))
            return

        user = self.session.user
        for story in stories:
            stories_list.append(
                StoryItem(
                    story,
                    starred=bool(user and user.is_favorite(story)),
                    show_star=user is not None,
                    deletable=self.current_view == "mine",
                )
            )

    def _update_user_status(self) -> None:
        user = self.session.user
        self.query_one(StatusBar).user_status = f"[b]{user.username}[/]" if user else "not logged in"
        self.sub_title = f"Logged in as {user.name or user.username}" if user else self.SUB_TITLE

    def _highlighted_story(self) -> Optional[Story]:
        item = self.query_one("#stories-list", ListView).highlighted_child
        if isinstance(item, StoryItem):
            return item.story
        return None

    def _require_login(self) -> bool:
        if self.session.is_authenticated:
            return True
        self.notify("Log in first (press l).", severity="warning")
        return False

    # --- Actions ---
    def action_show_view(self, view: str) -> None:
        if view != "all" and not self._require_login():
            return
        self.current_view = view
        self.render_stories()

    def action_refresh(self) -> None:
        self._start_loading("Refreshing...")
        self.run_worker(self.session.refresh_stories, name="refresh", thread=True, exit_on_error=False)

    def action_login(self) -> None:
        if self.session.is_authenticated:
            self.notify(f"Already logged in as {self.session.user.username}.")
            return
        self.push_screen(LoginScreen(self.session), self.on_login_closed)

    def on_login_closed(self, logged_in: Optional[bool]) -> None:
        if logged_in:
            self.notify(f"Welcome, {self.session.user.name or self.session.user.username}!")
            self.current_view = "all"
        self._update_user_status()
        self.render_stories()

    def action_logout(self) -> None:
        if not self.session.is_authenticated:
            return
        self.session.logout()
        self.current_view = "all"
        self._update_user_status()
        self.render_stories()
        self.notify("Logged out.")

    def action_submit_story(self) -> None:
        if not self._require_login():
            return
        self.push_screen(SubmitStoryScreen(self.session), self.on_submit_closed)

    def on_submit_closed(self, submitted: Optional[bool]) -> None:
        if submitted:
            self.notify("Story submitted.")
        self.render_stories()

    def action_toggle_favorite(self) -> None:
        if not self._require_login():
            return
        story = self._highlighted_story()
        if story is None:
            return
        self.query_one(StatusBar).loading_status = "Saving favorite..."
        self.run_worker(
            lambda: self.session.toggle_favorite(story.story_id),
            name="toggle_favorite",
            thread=True,
            exit_on_error=False,
        )

    def action_delete_story(self) -> None:
        if self.current_view != "mine" or not self._require_login():
            return
        story = self._highlighted_story()
        if story is None:
            return
        self.query_one(StatusBar).loading_status = "Deleting story..."
        self.run_worker(
            lambda: self.session.delete_story(story.story_id),
            name="delete_story",
            thread=True,
            exit_on_error=False,
        )

    def action_open_in_browser(self) -> None:
        story = self._highlighted_story()
        if story is not None:
            webbrowser.open(story.url)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, StoryItem):
            webbrowser.open(event.item.story.url)
