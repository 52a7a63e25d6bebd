"""Payload schemas for blogs supplied by a caller, e.g. an API request body."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

if TYPE_CHECKING:
    from collections.abc import Sequence


class PostModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    gid: UUID
    title: str = Field(min_length=1)
    content: str = ""


class BlogModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    gid: UUID
    url: str = Field(min_length=1)
    posts: tuple[PostModel, ...] = ()


_BLOG_LIST = TypeAdapter(list[BlogModel])


def parse_blogs(payload: object) -> list[BlogModel]:
    """Validate a decoded JSON payload holding a list of blogs."""

    return _BLOG_LIST.validate_python(payload)


def parse_blogs_json(raw: str | bytes) -> list[BlogModel]:
    return _BLOG_LIST.validate_json(raw)


def sample_blogs(names: Sequence[str] = ("01", "02")) -> list[BlogModel]:
    """Build blogs with two posts each, with fresh ids on every call."""

    return [
        BlogModel(
            gid=uuid4(),
            url=f"http://www.example{name}.com",
            posts=(
                PostModel(
                    gid=uuid4(),
                    title=f"Blog {name} - First Post",
                    content=f"This is the first post for Blog {name}",
                ),
                PostModel(
                    gid=uuid4(),
                    title=f"Blog {name} - Second Post",
                    content=f"This is the second post for Blog {name}",
                ),
            ),
        )
        for name in names
    ]
