"""Action input and environment variable names."""

from enum import StrEnum


class Inputs(StrEnum):
    """Action input names, keyed by configuration value."""

    AWSRegion = "aws-region"
    AWSAccessKeyId = "aws-access-key-id"
    AWSSecretAccessKey = "aws-secret-access-key"
    AWSSessionToken = "aws-session-token"
    AWSEndpointUrl = "aws-endpoint-url"
    BucketName = "bucket-name"


class Env(StrEnum):
    """Environment variable names, keyed by configuration value.

    The same names are used as state keys when resolved values are saved.
    """

    AWSRegion = "AWS_REGION"
    AWSAccessKeyId = "AWS_ACCESS_KEY_ID"
    AWSSecretAccessKey = "AWS_SECRET_ACCESS_KEY"
    AWSSessionToken = "AWS_SESSION_TOKEN"
    AWSEndpointUrl = "AWS_ENDPOINT_URL"
