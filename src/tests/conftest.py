from __future__ import annotations

from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from snooze_tui.api import ApiClient
from snooze_tui.datamodels import Story
from snooze_tui.user import User


def story_record(story_id: str, **overrides: Any) -> Dict[str, Any]:
    record = {
        "storyId": story_id,
        "title": f"Story {story_id}",
        "author": "Author",
        "url": f"http://example.com/{story_id}",
        "username": "bob",
        "createdAt": "2024-01-01T00:00:00.000Z",
    }
    record.update(overrides)
    return record


def make_story(story_id: str, **overrides: Any) -> Story:
    return Story.from_record(story_record(story_id, **overrides))


def user_record(favorites=(), stories=(), **overrides: Any) -> Dict[str, Any]:
    record = {
        "username": "bob",
        "name": "Bob",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "favorites": list(favorites),
        "stories": list(stories),
    }
    record.update(overrides)
    return record


@pytest.fixture
def api():
    return MagicMock(spec=ApiClient)


@pytest.fixture
def user(api):
    return User(api, username="bob", name="Bob", token="tok-123")
