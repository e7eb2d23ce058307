from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional

from .api import ApiClient
from .datamodels import Story
from .errors import ServerError, ValidationError

if TYPE_CHECKING:
    from .user import User

logger = logging.getLogger("snooze")

NEW_STORY_FIELDS = ("title", "author", "url")


class StoryList:
    """Ordered list of stories as the server returned them.

    Newly submitted stories are appended to the end. Story ids are unique
    within the list.
    """

    def __init__(self, api: ApiClient, stories: Optional[Iterable[Story]] = None):
        self.api = api
        self.stories: List[Story] = _unique_ordered_stories(stories or [])

    @classmethod
    def fetch_all(cls, api: ApiClient) -> "StoryList":
        """Fetch every story from the API and wrap them in a new StoryList."""
        data = api.get("/stories")
        records = data.get("stories")
        if not isinstance(records, list):
            raise ServerError("Malformed /stories response: no story list")
        stories = [Story.from_record(r) for r in records]
        logger.info("Fetched %d stories", len(stories))
        return cls(api, stories)

    def add_story(self, user: "User", new_story: Dict[str, str]) -> Story:
        """Post a story as ``user`` and append it to this list.

        ``new_story`` needs ``title``, ``author`` and ``url``. The story is
        also recorded in ``user.own_stories``.
        """
        fields = {key: (new_story.get(key) or "").strip() for key in NEW_STORY_FIELDS}
        blank = [key for key, value in fields.items() if not value]
        if blank:
            raise ValidationError(f"Missing story fields: {', '.join(blank)}")

        data = self.api.post("/stories", {"token": user.token, "story": fields})
        story = Story.from_record(data.get("story"))
        logger.info("Added story %s (%s)", story.story_id, story.title)

        if story.story_id not in self:
            self.stories.append(story)
        if not user.is_own_story(story):
            user.own_stories.append(story)
        return story

    def remove_story(self, user: "User", story_id: str) -> None:
        """Delete a story on the server, then drop it from every local collection.

        The story list, ``user.own_stories`` and ``user.favorites`` are all
        updated together once the request succeeds; if it fails none of them
        change.
        """
        self.api.delete(f"/stories/{story_id}", {"token": user.token})

        stories = [s for s in self.stories if s.story_id != story_id]
        own_stories = [s for s in user.own_stories if s.story_id != story_id]
        favorites = [s for s in user.favorites if s.story_id != story_id]

        self.stories = stories
        user.own_stories = own_stories
        user.favorites = favorites
        logger.info("Removed story %s", story_id)

    def get(self, story_id: str) -> Optional[Story]:
        for story in self.stories:
            if story.story_id == story_id:
                return story
        return None

    def __iter__(self) -> Iterator[Story]:
        return iter(self.stories)

    def __len__(self) -> int:
        return len(self.stories)

    def __contains__(self, story_id: object) -> bool:
        return any(s.story_id == story_id for s in self.stories)


def _unique_ordered_stories(items: Iterable[Story]) -> List[Story]:
    seen = set()
    out: List[Story] = []
    for s in items:
        if s.story_id not in seen:
            seen.add(s.story_id)
            out.append(s)
    return out
