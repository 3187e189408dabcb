"""Abstract S3 cache client."""

from types import TracebackType
from typing import BinaryIO, Protocol, Self


class S3ClientException(Exception):
    """Base exception for S3 client errors."""


class S3NoSuchKeyClientException(S3ClientException):
    """Raised when the specified object key does not exist."""


class S3NotFoundClientException(S3ClientException):
    """Raised when a HEAD request finds no object."""


class S3NoSuchBucketClientException(S3ClientException):
    """Raised when the specified bucket does not exist."""


class S3AccessDeniedClientException(S3ClientException):
    """Raised when access is denied to the specified resource."""


class S3InvalidTokenClientException(S3ClientException):
    """Raised when the token is invalid or expired."""


class S3RequestTimeoutClientException(S3ClientException):
    """Raised when the request times out."""


class S3InvalidObjectKeyClientException(S3ClientException):
    """Raised when an object key is not in the ``{key}/{file}`` form."""


class S3ServiceClientException(S3ClientException):
    """Raised when an S3 service error occurs."""


class AbstractS3CacheClient(Protocol):
    """Abstract S3 cache client.

    Objects live in a single bucket under ``{key}/{file}``.
    """

    async def __aenter__(self) -> Self:
        """Enter the context manager."""
        ...

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        """Exit the context manager."""
        ...

    async def get_object(self, key: str, file: str, stream: BinaryIO) -> bool:
        """Download an object into a stream.

        Args:
            key: The logical cache key.
            file: The artifact file name.
            stream: A writable binary stream that receives the object body.

        Returns:
            True if the object was downloaded, False if it does not exist.

        Raises:
            S3ClientException: For any error other than a missing key.

        """
        ...

    async def head_object(self, key: str, file: str) -> bool:
        """Check whether an object exists.

        Args:
            key: The logical cache key.
            file: The artifact file name.

        Returns:
            True if the object exists, False otherwise.

        Raises:
            S3ClientException: For any error other than a missing object.

        """
        ...

    async def list_objects(self, prefix: str, file: str) -> list[str]:
        """List logical keys under a prefix that hold the given file.

        Only the first page of the listing is checked.

        Args:
            prefix: The object key prefix to list.
            file: The artifact file name to match.

        Returns:
            Logical keys, most recently modified first.

        """
        ...

    async def put_object(self, key: str, file: str, stream: BinaryIO) -> None:
        """Upload a stream as an object.

        Args:
            key: The logical cache key.
            file: The artifact file name.
            stream: A readable binary stream with the object body.

        """
        ...
