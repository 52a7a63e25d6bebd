"""SQLAlchemy mapping metadata for the blogging example."""

from __future__ import annotations

import logging
import uuid
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, ForeignKey, String, Table, Text, Uuid, orm
from sqlalchemy.orm import relationship

from .model import BlogEntity, PostEntity

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

blog_table = Table(
    "blog",
    mapper_registry.metadata,
    Column("gid", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("url", String, nullable=False),
    Column("is_deleted", Boolean, nullable=False, default=False),
)

post_table = Table(
    "post",
    mapper_registry.metadata,
    Column("gid", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "blog_gid",
        UUIDColumnType,
        ForeignKey("blog.gid", ondelete="CASCADE"),
        nullable=True,
        index=True,
    ),
    Column("title", String, nullable=False),
    Column("content", Text, nullable=False, default=""),
    Column("is_deleted", Boolean, nullable=False, default=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the blogging entities."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        BlogEntity,
        blog_table,
        properties={
            "posts": relationship(
                PostEntity,
                back_populates="blog",
                order_by=post_table.c.title,
            ),
        },
    )
    mapper_registry.map_imperatively(
        PostEntity,
        post_table,
        properties={
            "blog": relationship(BlogEntity, back_populates="posts"),
        },
    )
    orm.configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
