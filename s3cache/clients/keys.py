"""Object key helpers.

Cache artifacts are stored under ``{key}/{file}``, where ``key`` is the logical
cache key and ``file`` is the artifact file name.
"""

from s3cache.clients.abstract import S3InvalidObjectKeyClientException


def join_key(key: str, file: str) -> str:
    """Build the object key for a logical key and file name."""
    return f"{key}/{file}"


def match_file(object_key: str, file: str) -> bool:
    """Check whether an object key holds the given file name."""
    return object_key.endswith(f"/{file}")


def get_key(object_key: str) -> str:
    """Get the logical key an object key was built from.

    Raises:
        S3InvalidObjectKeyClientException: If the object key has no separator.

    """
    index = object_key.rfind("/")
    if index == -1:
        msg = f"Invalid object key: {object_key}"
        raise S3InvalidObjectKeyClientException(msg)
    return object_key[:index]
