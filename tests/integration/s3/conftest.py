"""Conftest for S3 cache client tests."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from types import TracebackType
from typing import Any, BinaryIO, Self

import pytest
import pytest_asyncio
from botocore.exceptions import ClientError  # type: ignore[import-untyped]

from s3cache.clients.abstract import AbstractS3CacheClient
from s3cache.clients.aioboto3 import Aioboto3S3CacheClient

BUCKET_NAME = "cache-bucket"


def client_error(code: str, message: str, operation_name: str) -> ClientError:
    """Build a botocore ClientError the way the service returns it."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation_name)


class MockStreamingBody:
    """Mock of the aiobotocore streaming body."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._position = 0
        self.reads: list[int] = []

    async def read(self, amt: int | None = None) -> bytes:
        """Read up to ``amt`` bytes."""
        end = len(self._data) if amt is None or amt < 0 else self._position + amt
        chunk = self._data[self._position : end]
        self._position += len(chunk)
        self.reads.append(len(chunk))
        return chunk


class MockS3Client:
    """In-memory mock of the aioboto3 low-level S3 client."""

    def __init__(self, buckets: tuple[str, ...] = (BUCKET_NAME,), max_keys: int = 1000) -> None:
        self._objects: dict[str, dict[str, tuple[bytes, datetime | None]]] = {bucket: {} for bucket in buckets}
        self.max_keys = max_keys
        self.error_code: str | None = None
        self.not_found_code = "404"
        self.omit_key_count = False
        self.upload_part_size = 4
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> Self:
        """Enter the context manager."""
        self.entered = True
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        """Exit the context manager."""
        self.exited = True

    def add_object(self, key: str, body: bytes, last_modified: datetime | None = None) -> None:
        """Store an object directly. Objects stored without a timestamp are listed without LastModified."""
        self._objects[BUCKET_NAME][key] = (body, last_modified)

    def get_body(self, key: str, bucket: str = BUCKET_NAME) -> bytes:
        """Get the body of a stored object."""
        return self._objects[bucket][key][0]

    def _bucket(self, bucket: str, operation_name: str) -> dict[str, tuple[bytes, datetime | None]]:
        if self.error_code:
            raise client_error(self.error_code, "Injected error", operation_name)
        if bucket not in self._objects:
            raise client_error("NoSuchBucket", "The specified bucket does not exist", operation_name)
        return self._objects[bucket]

    async def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        """Get an object."""
        objects = self._bucket(Bucket, "GetObject")
        if Key not in objects:
            raise client_error("NoSuchKey", "The specified key does not exist.", "GetObject")
        body, last_modified = objects[Key]
        response: dict[str, Any] = {"Body": MockStreamingBody(body), "ContentLength": len(body)}
        if last_modified is not None:
            response["LastModified"] = last_modified
        return response

    async def head_object(self, Bucket: str, Key: str) -> dict[str, Any]:  # noqa: N803
        """Head an object."""
        objects = self._bucket(Bucket, "HeadObject")
        if Key not in objects:
            raise client_error(self.not_found_code, "Not Found", "HeadObject")
        body, last_modified = objects[Key]
        response: dict[str, Any] = {"ContentLength": len(body)}
        if last_modified is not None:
            response["LastModified"] = last_modified
        return response

    async def list_objects_v2(self, Bucket: str, Prefix: str = "") -> dict[str, Any]:  # noqa: N803
        """List the first page of objects under a prefix."""
        objects = self._bucket(Bucket, "ListObjectsV2")
        keys = sorted(key for key in objects if key.startswith(Prefix))
        page = keys[: self.max_keys]
        response: dict[str, Any] = {"IsTruncated": len(keys) > len(page), "Prefix": Prefix}
        if not self.omit_key_count:
            response["KeyCount"] = len(page)
        if page:
            response["Contents"] = []
            for key in page:
                body, last_modified = objects[key]
                entry: dict[str, Any] = {"Key": key, "Size": len(body)}
                if last_modified is not None:
                    entry["LastModified"] = last_modified
                response["Contents"].append(entry)
        return response

    async def upload_fileobj(
        self,
        Fileobj: BinaryIO,  # noqa: N803
        Bucket: str,  # noqa: N803
        Key: str,  # noqa: N803
        Callback: Any = None,  # noqa: N803
    ) -> None:
        """Upload a file object in parts, reporting each part to the callback."""
        objects = self._bucket(Bucket, "PutObject")
        parts = []
        while part := Fileobj.read(self.upload_part_size):
            parts.append(part)
            if Callback is not None:
                Callback(len(part))
        objects[Key] = (b"".join(parts), datetime.now(UTC))


class MockSession:
    """Mock of the aioboto3 session."""

    def __init__(self, client: MockS3Client) -> None:
        self._client = client
        self.client_calls: list[tuple[str, dict[str, Any]]] = []

    def client(self, service_name: str, **kwargs: Any) -> MockS3Client:
        """Create a client."""
        self.client_calls.append((service_name, kwargs))
        return self._client


@pytest.fixture
def mock_s3() -> MockS3Client:
    """Get the in-memory S3 store."""
    return MockS3Client()


@pytest.fixture
def mock_session(mock_s3: MockS3Client) -> MockSession:
    """Get a session that hands out the in-memory S3 store."""
    return MockSession(mock_s3)


@pytest_asyncio.fixture
async def s3_cache_client(mock_session: MockSession) -> AsyncGenerator[AbstractS3CacheClient, None]:
    """Get an S3 cache client backed by the in-memory store."""
    async with Aioboto3S3CacheClient(
        bucket_name=BUCKET_NAME, region_name="eu-west-1", session=mock_session, chunk_size=4
    ) as client:
        yield client
