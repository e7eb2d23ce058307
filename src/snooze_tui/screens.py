from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.worker import Worker, WorkerState
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Markdown,
)

from .errors import ApiError
from .session import Session

logger = logging.getLogger("snooze")


class LoginScreen(ModalScreen[bool]):
    """Login and signup forms side by side. Dismisses with True once logged in."""

    BINDINGS = [
        Binding("escape", "cancel", "Back"),
    ]

    def __init__(self, session: Session):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        with Horizontal(id="auth-forms"):
            with Vertical(id="login-form", classes="form"):
                yield Label("Login", classes="form-title")
                yield Input(placeholder="username", id="login-username")
                yield Input(placeholder="password", password=True, id="login-password")
                yield Button("Login", id="login-submit", variant="primary")
            with Vertical(id="signup-form", classes="form"):
                yield Label("Create account", classes="form-title")
                yield Input(placeholder="name", id="signup-name")
                yield Input(placeholder="username", id="signup-username")
                yield Input(placeholder="password", password=True, id="signup-password")
                yield Button("Create account", id="signup-submit")
        yield Label("", id="auth-error", classes="form-error")

    def on_mount(self) -> None:
        self.query_one("#login-username", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login-submit":
            self.submit_login()
        elif event.button.id == "signup-submit":
            self.submit_signup()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id and event.input.id.startswith("login-"):
            self.submit_login()
        elif event.input.id and event.input.id.startswith("signup-"):
            self.submit_signup()

    def submit_login(self) -> None:
        username = self.query_one("#login-username", Input).value.strip()
        password = self.query_one("#login-password", Input).value
        if not username or not password:
            self._show_error("Username and password are required.")
            return
        self._show_error("")
        self.run_worker(
            lambda: self.session.login(username, password),
            name="auth",
            thread=True,
            exit_on_error=False,
        )

    def submit_signup(self) -> None:
        name = self.query_one("#signup-name", Input).value.strip()
        username = self.query_one("#signup-username", Input).value.strip()
        password = self.query_one("#signup-password", Input).value
        if not name or not username or not password:
            self._show_error("Name, username and password are all required.")
            return
        self._show_error("")
        self.run_worker(
            lambda: self.session.signup(username, password, name),
            name="auth",
            thread=True,
            exit_on_error=False,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "auth":
            return
        if event.state is WorkerState.SUCCESS:
            self.dismiss(True)
        elif event.state is WorkerState.ERROR:
            error = event.worker.error
            logger.error("Authentication failed: %s", error)
            if isinstance(error, ApiError):
                self._show_error(error.message)
            else:
                self._show_error(f"Authentication failed: {error}")

    def action_cancel(self) -> None:
        self.dismiss(False)

    def _show_error(self, message: str) -> None:
        self.query_one("#auth-error", Label).update(message)


class SubmitStoryScreen(ModalScreen[bool]):
    """Form for posting a new story. Dismisses with True once it is posted."""

    BINDINGS = [
        Binding("escape", "cancel", "Back"),
    ]

    def __init__(self, session: Session):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        with Vertical(id="submit-form", classes="form"):
            yield Label("Submit a story", classes="form-title")
            yield Input(placeholder="author name", id="create-author")
            yield Input(placeholder="story title", id="create-title")
            yield Input(placeholder="story url", id="create-url")
            yield Button("Submit", id="create-submit", variant="primary")
            yield Label("", id="create-error", classes="form-error")

    def on_mount(self) -> None:
        self.query_one("#create-author", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "create-submit":
            self.submit_story()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.submit_story()

    def submit_story(self) -> None:
        title = self.query_one("#create-title", Input).value.strip()
        author = self.query_one("#create-author", Input).value.strip()
        url = self.query_one("#create-url", Input).value.strip()
        if not title or not author or not url:
            self._show_error("Title, author and url are all required.")
            return
        self._show_error("")
        self.run_worker(
            lambda: self.session.submit_story(title, author, url),
            name="submit_story",
            thread=True,
            exit_on_error=False,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "submit_story":
            return
        if event.state is WorkerState.SUCCESS:
            self.dismiss(True)
        elif event.state is WorkerState.ERROR:
            error = event.worker.error
            logger.error("Story submission failed: %s", error)
            message = error.message if isinstance(error, ApiError) else str(error)
            self._show_error(f"Could not submit story: {message}")

    def action_cancel(self) -> None:
        self.dismiss(False)

    def _show_error(self, message: str) -> None:
        self.query_one("#create-error", Label).update(message)


class ErrorScreen(Screen):
    BINDINGS = [
        Binding("q", "app.quit", "Quit"),
        Binding("escape", "app.pop_screen", "Back"),
    ]

    def __init__(self, title: str, message: str):
        super().__init__()
        self.title = title
        self.error_message = message

    def compose(self) -> ComposeResult:
        yield Header()
        yield Label(self.title, classes="error-title")
        yield Markdown(self.error_message)
        yield Footer()
