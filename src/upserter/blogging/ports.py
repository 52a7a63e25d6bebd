"""Persistence ports used by the blogging upserters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from .model import BlogEntity, PostEntity


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class BlogRepository(Repository["BlogEntity"], Protocol):
    """Persistence contract for blogs."""

    def list_all(self) -> list[BlogEntity]: ...


@runtime_checkable
class PostRepository(Repository["PostEntity"], Protocol):
    """Persistence contract for posts."""


@dataclass(slots=True)
class BloggingRepositories:
    blogs: BlogRepository
    posts: PostRepository


@runtime_checkable
class BloggingUnitOfWork(Protocol):
    """Transaction boundary around the blogging repositories."""

    @property
    def repositories(self) -> BloggingRepositories: ...

    def __enter__(self) -> BloggingUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
