"""Pydantic S3 cache client models."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel


class S3CacheObject(BaseModel):
    """An object returned by a bucket listing."""

    key: str
    last_modified: datetime | None = None
    size: int | None = None


class S3CacheListing(BaseModel):
    """A single page of a bucket listing."""

    is_truncated: bool = False
    key_count: int | None = None
    contents: Sequence[S3CacheObject] = ()
