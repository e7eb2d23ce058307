from __future__ import annotations

import logging
from typing import List, Optional

from .api import ApiClient
from .config import clear_credentials, load_credentials, save_credentials
from .datamodels import Story
from .errors import AuthError, NotFoundError
from .stories import StoryList
from .user import User

logger = logging.getLogger("snooze")


class Session:
    """Current story list and current user, owned by the app.

    The UI reads from this object and calls its methods; nothing else keeps
    a reference to "the" user or "the" story list.
    """

    def __init__(self, api: ApiClient, remember_login: bool = True):
        self.api = api
        self.remember_login = remember_login
        self.story_list: Optional[StoryList] = None
        self.user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def start(self) -> None:
        """Restore a stored login if there is one, then load the stories."""
        credentials = load_credentials() if self.remember_login else None
        if credentials:
            self.user = User.restore_session(
                self.api, credentials["token"], credentials["username"]
            )
            if self.user is None:
                clear_credentials()
        self.refresh_stories()

    def refresh_stories(self) -> StoryList:
        self.story_list = StoryList.fetch_all(self.api)
        return self.story_list

    def login(self, username: str, password: str) -> User:
        self._set_user(User.login(self.api, username, password))
        return self.user

    def signup(self, username: str, password: str, name: str) -> User:
        self._set_user(User.signup(self.api, username, password, name))
        return self.user

    def logout(self) -> None:
        if self.user:
            logger.info("Logged out %s", self.user.username)
        self.user = None
        clear_credentials()

    def submit_story(self, title: str, author: str, url: str) -> Story:
        user = self._require_user()
        if self.story_list is None:
            self.refresh_stories()
        return self.story_list.add_story(user, {"title": title, "author": author, "url": url})

    def delete_story(self, story_id: str) -> None:
        user = self._require_user()
        if self.story_list is None:
            self.story_list = StoryList(self.api)
        self.story_list.remove_story(user, story_id)

    def toggle_favorite(self, story_id: str) -> List[Story]:
        user = self._require_user()
        story = self.find_story(story_id)
        if story is None:
            raise NotFoundError(f"No story with id {story_id}")
        return user.toggle_favorite(story)

    def find_story(self, story_id: str) -> Optional[Story]:
        candidates = self.all_stories() + self.favorites() + self.own_stories()
        for story in candidates:
            if story.story_id == story_id:
                return story
        return None

    def all_stories(self) -> List[Story]:
        return list(self.story_list) if self.story_list else []

    def favorites(self) -> List[Story]:
        return list(self.user.favorites) if self.user else []

    def own_stories(self) -> List[Story]:
        return list(self.user.own_stories) if self.user else []

    def _set_user(self, user: User) -> None:
        self.user = user
        if self.remember_login:
            save_credentials(user.username, user.token)

    def _require_user(self) -> User:
        if self.user is None:
            raise AuthError("You need to log in first.")
        return self.user
