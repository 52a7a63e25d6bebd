"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from .mappings import blog_table
from .model import BlogEntity, PostEntity

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyBlogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: BlogEntity) -> None:
        self.session.add(entity)

    def list_all(self) -> list[BlogEntity]:
        stmt = select(BlogEntity).order_by(blog_table.c.url)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyPostRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PostEntity) -> None:
        self.session.add(entity)
