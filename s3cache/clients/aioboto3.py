"""AIOboto3 S3 cache client."""

import logging
import os
from datetime import UTC, datetime
from types import TracebackType
from typing import Any, BinaryIO, Self

import aioboto3  # type: ignore[import-untyped]
from botocore.exceptions import ClientError  # type: ignore[import-untyped]

from s3cache.clients.abstract import (
    S3AccessDeniedClientException,
    S3ClientException,
    S3InvalidTokenClientException,
    S3NoSuchBucketClientException,
    S3NoSuchKeyClientException,
    S3NotFoundClientException,
    S3RequestTimeoutClientException,
    S3ServiceClientException,
)
from s3cache.clients.keys import get_key, join_key, match_file
from s3cache.clients.pydantic import S3CacheListing, S3CacheObject
from s3cache.configs.s3 import S3Config

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024 * 1024

_OLDEST = datetime.min.replace(tzinfo=UTC)


def _stream_size(stream: BinaryIO) -> int | None:
    """Get the number of bytes left in a stream, if it can be measured."""
    try:
        return os.fstat(stream.fileno()).st_size - stream.tell()
    except (AttributeError, OSError, ValueError):
        pass
    try:
        position = stream.tell()
        end = stream.seek(0, os.SEEK_END)
        stream.seek(position)
    except (AttributeError, OSError, ValueError):
        return None
    return end - position


class Aioboto3S3CacheClient:
    """AIOboto3 S3 cache client.

    This client wraps aioboto3 to read and write cache artifacts in one bucket.
    It implements all methods from the AbstractS3CacheClient protocol.
    """

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        session: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            bucket_name: The bucket holding the cache artifacts.
            aws_access_key_id: AWS access key ID.
            aws_secret_access_key: AWS secret access key.
            aws_session_token: AWS session token.
            region_name: AWS region name.
            endpoint_url: Custom endpoint URL for S3-compatible stores.
            chunk_size: Size of the chunks read from a downloaded body.
            session: An aioboto3 session to use instead of creating one.

        """
        self._session = session or aioboto3.Session(
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            aws_session_token=aws_session_token,
            region_name=region_name,
        )
        self._bucket_name = bucket_name
        self._region_name = region_name
        self._endpoint_url = endpoint_url
        self._chunk_size = chunk_size
        self._client: Any = None

    @classmethod
    def from_config(cls, config: S3Config, session: Any = None) -> Self:
        """Create a client from the S3 config."""
        return cls(
            bucket_name=config.bucket_name,
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
            aws_session_token=config.aws_session_token,
            region_name=config.aws_region,
            endpoint_url=config.endpoint_url,
            session=session,
        )

    @property
    def bucket_name(self) -> str:
        """The bucket holding the cache artifacts."""
        return self._bucket_name

    async def __aenter__(self) -> Self:
        """Enter the context manager."""
        client_kwargs: dict[str, Any] = {}
        if self._region_name:
            client_kwargs["region_name"] = self._region_name
        if self._endpoint_url:
            client_kwargs["endpoint_url"] = self._endpoint_url

        self._client = await self._session.client("s3", **client_kwargs).__aenter__()
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        """Exit the context manager."""
        if self._client:
            await self._client.__aexit__(exc_type, exc_value, traceback)
            self._client = None

    def _handle_client_error(self, error: ClientError) -> None:
        """Map boto3 ClientError to custom S3 exceptions.

        Args:
            error: The boto3 ClientError to map.

        Raises:
            S3NoSuchKeyClientException: If object key does not exist.
            S3NotFoundClientException: If a HEAD request found nothing.
            S3NoSuchBucketClientException: If bucket does not exist.
            S3AccessDeniedClientException: If access is denied.
            S3InvalidTokenClientException: If token is invalid or expired.
            S3RequestTimeoutClientException: If request times out.
            S3ServiceClientException: For other S3 service errors.

        """
        error_code = error.response.get("Error", {}).get("Code", "")
        error_message = error.response.get("Error", {}).get("Message", str(error))

        exception_map: dict[str, type[S3ClientException]] = {
            "NoSuchKey": S3NoSuchKeyClientException,
            "404": S3NotFoundClientException,
            "NotFound": S3NotFoundClientException,
            "NoSuchBucket": S3NoSuchBucketClientException,
            "AccessDenied": S3AccessDeniedClientException,
            "403": S3AccessDeniedClientException,
            "InvalidToken": S3InvalidTokenClientException,
            "ExpiredToken": S3InvalidTokenClientException,
            "RequestTimeout": S3RequestTimeoutClientException,
        }

        exception_class = exception_map.get(error_code, S3ServiceClientException)
        raise exception_class(error_message) from error

    async def _download(self, object_key: str, stream: BinaryIO) -> None:
        try:
            response = await self._client.get_object(Bucket=self._bucket_name, Key=object_key)
            body = response["Body"]
            while chunk := await body.read(self._chunk_size):
                stream.write(chunk)
        except ClientError as e:
            self._handle_client_error(e)
            raise  # This should never be reached, but for type checking

    async def _list_objects_v2(self, prefix: str) -> S3CacheListing:
        try:
            response = await self._client.list_objects_v2(Bucket=self._bucket_name, Prefix=prefix)
        except ClientError as e:
            self._handle_client_error(e)
            raise  # This should never be reached, but for type checking

        return S3CacheListing(
            is_truncated=response.get("IsTruncated", False),
            key_count=response.get("KeyCount"),
            contents=[
                S3CacheObject(
                    key=obj["Key"],
                    last_modified=obj.get("LastModified"),
                    size=obj.get("Size"),
                )
                for obj in response.get("Contents") or []
            ],
        )

    async def get_object(self, key: str, file: str, stream: BinaryIO) -> bool:
        """Download an object into a stream, returning False if it does not exist."""
        logger.debug("Getting object from S3 with key %s, file %s.", key, file)
        try:
            await self._download(join_key(key, file), stream)
        except S3NoSuchKeyClientException:
            return False
        return True

    async def head_object(self, key: str, file: str) -> bool:
        """Check whether an object exists."""
        logger.debug("Heading object from S3 with key %s, file %s.", key, file)
        try:
            await self._client.head_object(Bucket=self._bucket_name, Key=join_key(key, file))
        except ClientError as e:
            try:
                self._handle_client_error(e)
            except S3NotFoundClientException:
                return False
            raise  # This should never be reached, but for type checking
        return True

    async def list_objects(self, prefix: str, file: str) -> list[str]:
        """List logical keys under a prefix that hold the file, newest first."""
        logger.debug("Listing objects from S3 with prefix %s.", prefix)
        listing = await self._list_objects_v2(prefix)
        if listing.is_truncated:
            logger.info(
                "Too many objects in S3 with prefix %s, only %s objects will be checked.",
                prefix,
                len(listing.contents) if listing.key_count is None else listing.key_count,
            )

        matches = [obj for obj in listing.contents if match_file(obj.key, file)]
        matches.sort(key=lambda obj: obj.last_modified or _OLDEST, reverse=True)
        return [get_key(obj.key) for obj in matches]

    async def put_object(self, key: str, file: str, stream: BinaryIO) -> None:
        """Upload a stream through the managed multipart upload."""
        logger.debug("Putting object to S3 with key %s, file %s.", key, file)
        total = _stream_size(stream)
        loaded = 0

        def on_progress(bytes_transferred: int) -> None:
            nonlocal loaded
            loaded += bytes_transferred
            logger.debug("Uploaded %s of %s bytes.", loaded, "unknown" if total is None else total)

        try:
            await self._client.upload_fileobj(stream, self._bucket_name, join_key(key, file), Callback=on_progress)
        except ClientError as e:
            self._handle_client_error(e)
            raise  # This should never be reached, but for type checking
