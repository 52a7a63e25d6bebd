"""Blog and post entities persisted by the example."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(eq=False, kw_only=True)
class BlogEntity:
    gid: UUID = field(default_factory=uuid4)
    url: str
    is_deleted: bool = False
    posts: list[PostEntity] = field(default_factory=list["PostEntity"])

    @property
    def active_posts(self) -> list[PostEntity]:
        return [post for post in self.posts if not post.is_deleted]


@dataclass(eq=False, kw_only=True)
class PostEntity:
    gid: UUID = field(default_factory=uuid4)
    title: str
    content: str
    is_deleted: bool = False
    blog: BlogEntity | None = None
