"""Application entry points for the blogging example."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from .unit_of_work import SqlAlchemyBloggingUnitOfWork
from .upserters import BlogUpserter, PostUpserter

if TYPE_CHECKING:
    from collections.abc import Iterable

    from upserter.results import UpsertResult

    from .model import BlogEntity
    from .ports import BloggingUnitOfWork
    from .schema import BlogModel

UnitOfWorkFactory = Callable[[], "BloggingUnitOfWork"]

log = getLogger(__name__)


def sync_blogs(
    supplied: Iterable[BlogModel],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> UpsertResult[BlogEntity, BlogModel]:
    """Make the stored blogs match ``supplied`` and commit the changes.

    Every stored blog is treated as existing, so blogs missing from
    ``supplied`` are soft-deleted along with their posts.
    """

    effective_uow = unit_of_work_factory or SqlAlchemyBloggingUnitOfWork
    with effective_uow() as uow:
        repositories = uow.repositories
        upserter = BlogUpserter(
            blogs=repositories.blogs,
            post_upserter=PostUpserter(posts=repositories.posts),
        )
        existing = repositories.blogs.list_all()
        log.info("Synchronising blogs: existing=%s", len(existing))
        result = upserter.sync(existing, supplied)
        uow.commit()

    log.info(
        "Finished blog sync: inserted=%s, updated=%s, deleted=%s",
        result.inserted,
        result.updated,
        result.deleted,
    )
    return result
