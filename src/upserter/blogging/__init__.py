"""Worked example: synchronising blogs and their posts with a SQL store."""

from __future__ import annotations

from .app import sync_blogs
from .model import BlogEntity, PostEntity
from .schema import BlogModel, PostModel, parse_blogs, parse_blogs_json, sample_blogs
from .upserters import BlogUpserter, PostUpserter

__all__ = [
    "BlogEntity",
    "BlogModel",
    "BlogUpserter",
    "PostEntity",
    "PostModel",
    "PostUpserter",
    "parse_blogs",
    "parse_blogs_json",
    "sample_blogs",
    "sync_blogs",
]
