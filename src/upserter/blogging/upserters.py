"""Blog and post upserters built on the service base classes.

Posts are synchronised per blog: inserting, updating or deleting a blog also
runs the post upserter against that blog's posts. Deletes are soft, so a blog
or post that reappears in a later payload is restored by the update path.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from upserter.errors import MissingArgumentError
from upserter.service import ContextUpserterService, UpserterService

from .model import BlogEntity, PostEntity
from .schema import BlogModel, PostModel

if TYPE_CHECKING:
    from collections.abc import Iterable

    from upserter.results import UpsertResult

    from .ports import BlogRepository, PostRepository

log = getLogger(__name__)


class PostUpserter(ContextUpserterService[PostEntity, PostModel, BlogEntity]):
    def __init__(self, posts: PostRepository) -> None:
        self._posts = posts

    def sync(
        self,
        existing_items: Iterable[PostEntity],
        supplied_items: Iterable[PostModel],
        parent: BlogEntity,
    ) -> UpsertResult[PostEntity, PostModel]:
        if parent is None:
            raise MissingArgumentError("parent")
        log.debug("Synchronising posts of blog %s", parent.gid)
        return self.upsert(
            existing_items,
            supplied_items,
            key_of_existing=lambda post: post.gid,
            key_of_supplied=lambda post: post.gid,
            context=parent,
        )

    def insert(self, supplied_item: PostModel, context: BlogEntity) -> None:
        log.debug("Inserting post %s", supplied_item.gid)
        post = PostEntity(
            gid=supplied_item.gid,
            title=supplied_item.title,
            content=supplied_item.content,
            blog=context,
        )
        # the mapped relationship already links both sides
        if post not in context.posts:
            context.posts.append(post)
        self._posts.add(post)

    def update(
        self, existing_item: PostEntity, supplied_item: PostModel, context: BlogEntity
    ) -> None:
        log.debug("Updating post %s", existing_item.gid)
        existing_item.title = supplied_item.title
        existing_item.content = supplied_item.content
        existing_item.is_deleted = False

    def delete(self, existing_item: PostEntity, context: BlogEntity) -> None:
        log.debug("Soft-deleting post %s of blog %s", existing_item.gid, context.gid)
        existing_item.is_deleted = True


class BlogUpserter(UpserterService[BlogEntity, BlogModel]):
    def __init__(self, blogs: BlogRepository, post_upserter: PostUpserter) -> None:
        self._blogs = blogs
        self._post_upserter = post_upserter

    def sync(
        self,
        existing_items: Iterable[BlogEntity],
        supplied_items: Iterable[BlogModel],
    ) -> UpsertResult[BlogEntity, BlogModel]:
        return self.upsert(
            existing_items,
            supplied_items,
            key_of_existing=lambda blog: blog.gid,
            key_of_supplied=lambda blog: blog.gid,
        )

    def insert(self, supplied_item: BlogModel) -> None:
        log.debug("Inserting blog %s", supplied_item.gid)
        blog = BlogEntity(gid=supplied_item.gid, url=supplied_item.url)
        self._blogs.add(blog)
        # a new blog has no posts yet, so every supplied post is inserted
        self._post_upserter.sync(blog.posts, supplied_item.posts, parent=blog)

    def update(self, existing_item: BlogEntity, supplied_item: BlogModel) -> None:
        log.debug("Updating blog %s", existing_item.gid)
        existing_item.url = supplied_item.url
        existing_item.is_deleted = False
        self._post_upserter.sync(existing_item.posts, supplied_item.posts, parent=existing_item)

    def delete(self, existing_item: BlogEntity) -> None:
        log.debug("Soft-deleting blog %s", existing_item.gid)
        existing_item.is_deleted = True
        self._post_upserter.sync(existing_item.posts, (), parent=existing_item)
