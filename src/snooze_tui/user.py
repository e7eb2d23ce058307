from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from .api import ApiClient
from .datamodels import Story
from .errors import ApiError, AuthError, NotFoundError, ServerError

logger = logging.getLogger("snooze")


class User:
    """The logged-in user, with their favorites, own stories and API token."""

    def __init__(
        self,
        api: ApiClient,
        username: str,
        name: str,
        token: str,
        created_at: str = "",
        favorites: Optional[Iterable[Story]] = None,
        own_stories: Optional[Iterable[Story]] = None,
    ):
        self.api = api
        self.username = username
        self.name = name
        self.created_at = created_at
        self.favorites: List[Story] = list(favorites or [])
        self.own_stories: List[Story] = list(own_stories or [])
        self.token = token

    def __repr__(self) -> str:
        return f"User(username={self.username!r}, favorites={len(self.favorites)}, own_stories={len(self.own_stories)})"

    @classmethod
    def from_record(cls, api: ApiClient, record: Dict[str, Any], token: str) -> "User":
        if not isinstance(record, dict) or not record.get("username"):
            raise ServerError(f"Malformed user record: {record!r}")
        return cls(
            api,
            username=record["username"],
            name=record.get("name") or "",
            token=token,
            created_at=record.get("createdAt") or "",
            favorites=_stories_from_records(record.get("favorites")),
            own_stories=_stories_from_records(record.get("stories")),
        )

    @classmethod
    def _from_auth_response(cls, api: ApiClient, data: Dict[str, Any]) -> "User":
        token = data.get("token")
        if not token:
            raise ServerError("Authentication response did not include a token")
        return cls.from_record(api, data.get("user"), token)

    @classmethod
    def signup(cls, api: ApiClient, username: str, password: str, name: str) -> "User":
        """Register a new account and return it logged in."""
        data = api.post(
            "/signup", {"user": {"username": username, "password": password, "name": name}}
        )
        user = cls._from_auth_response(api, data)
        logger.info("Signed up as %s", user.username)
        return user

    @classmethod
    def login(cls, api: ApiClient, username: str, password: str) -> "User":
        """Log in with a username and password.

        The API answers 404 for an unknown username; that is reported as an
        :class:`AuthError` like any other bad credential.
        """
        try:
            data = api.post("/login", {"user": {"username": username, "password": password}})
        except NotFoundError as e:
            raise AuthError(e.message, e.status) from e
        user = cls._from_auth_response(api, data)
        logger.info("Logged in as %s", user.username)
        return user

    @classmethod
    def restore_session(cls, api: ApiClient, token: str, username: str) -> Optional["User"]:
        """Rebuild a User from stored credentials.

        Returns None when the token is no longer accepted or the server can't
        be reached; a stale stored session is routine at startup.
        """
        try:
            data = api.get(f"/users/{username}", params={"token": token})
            user = cls.from_record(api, data.get("user"), token)
        except ApiError as e:
            logger.warning("Could not restore session for %s: %s", username, e)
            return None
        logger.info("Restored session for %s", user.username)
        return user

    def toggle_favorite(self, story: Story) -> List[Story]:
        """Favorite ``story`` if it isn't already, otherwise unfavorite it."""
        if self.is_favorite(story):
            return self.remove_favorite(story)
        return self.add_favorite(story)

    def add_favorite(self, story: Story) -> List[Story]:
        data = self.api.post(self._favorite_path(story), {"token": self.token})
        return self._replace_favorites(data)

    def remove_favorite(self, story: Story) -> List[Story]:
        data = self.api.delete(self._favorite_path(story), {"token": self.token})
        return self._replace_favorites(data)

    def is_favorite(self, story: Story) -> bool:
        return any(s.story_id == story.story_id for s in self.favorites)

    def is_own_story(self, story: Story) -> bool:
        return any(s.story_id == story.story_id for s in self.own_stories)

    def _favorite_path(self, story: Story) -> str:
        return f"/users/{self.username}/favorites/{story.story_id}"

    def _replace_favorites(self, data: Dict[str, Any]) -> List[Story]:
        # The server's list is authoritative; we never patch favorites locally.
        record = data.get("user")
        if not isinstance(record, dict):
            raise ServerError("Favorites response did not include the user")
        self.favorites = _stories_from_records(record.get("favorites"))
        logger.debug("%s now has %d favorites", self.username, len(self.favorites))
        return self.favorites


def _stories_from_records(records: Any) -> List[Story]:
    if records is None:
        return []
    if not isinstance(records, list):
        raise ServerError(f"Expected a list of stories, got {type(records).__name__}")
    return [Story.from_record(r) for r in records]
