from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict
from urllib.parse import urlsplit

from .errors import ParseError, ServerError

STORY_FIELDS = ("storyId", "title", "author", "url", "username")
TEXT_FIELDS = ("title", "author", "url", "username")

HOST_PATTERN = re.compile(r"[\w.-]+")
IPV6_PATTERN = re.compile(r"[0-9A-Fa-f:.]+")


# --- Data models ---
@dataclass(frozen=True)
class Story:
    story_id: str
    title: str
    author: str
    url: str
    username: str
    created_at: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Story":
        """Build a Story from an API story record, rejecting incomplete ones."""
        if not isinstance(record, dict):
            raise ServerError(f"Malformed story record: {record!r}")
        missing = [key for key in STORY_FIELDS if record.get(key) is None]
        if missing:
            raise ServerError(f"Malformed story record, missing {', '.join(missing)}")
        wrong_type = [key for key in TEXT_FIELDS if not isinstance(record[key], str)]
        if wrong_type:
            raise ServerError(f"Malformed story record, non-text {', '.join(wrong_type)}")
        return cls(
            story_id=str(record["storyId"]),
            title=record["title"],
            author=record["author"],
            url=record["url"],
            username=record["username"],
            created_at=str(record.get("createdAt") or ""),
        )

    def hostname(self) -> str:
        """Return the host part of the story url.

        IPv6 literals keep their brackets, the way browsers report them.
        """
        try:
            parts = urlsplit(self.url)
            host = parts.hostname
            # raises on a non-numeric or out-of-range port
            parts.port
        except ValueError as e:
            raise ParseError(f"Invalid story url: {self.url!r}") from e
        if not parts.scheme or not host:
            raise ParseError(f"Invalid story url: {self.url!r}")
        if ":" in host:
            if not IPV6_PATTERN.fullmatch(host):
                raise ParseError(f"Invalid story url: {self.url!r}")
            return f"[{host}]"
        if not HOST_PATTERN.fullmatch(host):
            raise ParseError(f"Invalid story url: {self.url!r}")
        return host

    def display_hostname(self) -> str:
        try:
            return self.hostname()
        except ParseError:
            return ""
