"""S3 config."""

import os
from typing import Any

from pydantic import Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from s3cache.actions.constants import Env, Inputs
from s3cache.actions.core import get_input, get_state, save_state, set_secret

# Values resolved from state, then input, then environment, and saved back to state.
STATEFUL_FIELDS: dict[str, tuple[Inputs, Env]] = {
    "aws_region": (Inputs.AWSRegion, Env.AWSRegion),
    "aws_access_key_id": (Inputs.AWSAccessKeyId, Env.AWSAccessKeyId),
    "aws_secret_access_key": (Inputs.AWSSecretAccessKey, Env.AWSSecretAccessKey),
    "aws_session_token": (Inputs.AWSSessionToken, Env.AWSSessionToken),
    "endpoint_url": (Inputs.AWSEndpointUrl, Env.AWSEndpointUrl),
}

SECRET_FIELDS = frozenset({"aws_secret_access_key", "aws_session_token"})


def resolve_stateful_input(inputs_key: Inputs, env_key: Env, secret: bool = False) -> str:
    """Resolve a value from state, action input or environment, and save it to state.

    Args:
        inputs_key: The action input to read.
        env_key: The environment variable to read. Also used as the state key.
        secret: Whether to mask a non-empty value in the job log.

    Returns:
        The resolved value, or an empty string.

    """
    value = get_state(env_key) or get_input(inputs_key) or os.environ.get(env_key, "")
    if value and secret:
        set_secret(value)
    save_state(env_key, value)
    return value


class ActionInputsSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by action state, inputs and environment."""

    def __init__(self, settings_cls: type[BaseSettings], skip: frozenset[str] = frozenset()) -> None:
        super().__init__(settings_cls)
        self._skip = skip

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        """Resolve a single field."""
        if field_name == "bucket_name":
            return get_input(Inputs.BucketName, required=True), field_name, False

        inputs_key, env_key = STATEFUL_FIELDS[field_name]
        return resolve_stateful_input(inputs_key, env_key, secret=field_name in SECRET_FIELDS), field_name, False

    def __call__(self) -> dict[str, Any]:
        """Resolve all fields that were not passed explicitly."""
        data: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in self._skip:
                continue
            value, key, _ = self.get_field_value(field, field_name)
            data[key] = value
        return data


class S3Config(BaseSettings):
    """S3 configuration.

    This config is used to configure the S3 cache client. Outside of explicit
    constructor arguments, values are resolved the way an action step sees them:
    state saved by an earlier step, then the action input, then the environment.
    Resolved values are saved to state, so later steps reuse them.

    Attributes:
        aws_region (str | None): The AWS region where the S3 bucket is located.
            Set via the `aws-region` input or AWS_REGION environment variable.
        aws_access_key_id (str | None): The AWS access key ID.
            Set via the `aws-access-key-id` input or AWS_ACCESS_KEY_ID environment variable.
        aws_secret_access_key (str | None): The AWS secret access key.
            Set via the `aws-secret-access-key` input or AWS_SECRET_ACCESS_KEY environment variable.
        aws_session_token (str | None): The AWS session token for temporary credentials.
            Set via the `aws-session-token` input or AWS_SESSION_TOKEN environment variable.
        endpoint_url (str | None): The complete URL to an S3-compatible service (e.g., MinIO).
            Set via the `aws-endpoint-url` input or AWS_ENDPOINT_URL environment variable.
        bucket_name (str): The bucket holding the cache artifacts.
            Set via the required `bucket-name` input.

    Empty values become None, so the SDK falls back to its default credential chain.

    """

    aws_region: str | None = Field(default=None, description="The AWS region where the S3 bucket is located.")
    aws_access_key_id: str | None = Field(default=None, description="The AWS access key ID.")
    aws_secret_access_key: str | None = Field(default=None, description="The AWS secret access key.")
    aws_session_token: str | None = Field(default=None, description="The AWS session token for temporary credentials.")
    endpoint_url: str | None = Field(default=None, description="The complete URL to an S3-compatible service.")
    bucket_name: str = Field(description="The bucket holding the cache artifacts.")

    @field_validator(*STATEFUL_FIELDS, mode="before")
    @classmethod
    def empty_to_none(cls, value: Any) -> Any:
        """Treat empty strings as unset."""
        if value == "":
            return None
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use explicit arguments first, then the action inputs source."""
        init_kwargs = getattr(init_settings, "init_kwargs", {})
        return init_settings, ActionInputsSettingsSource(settings_cls, skip=frozenset(init_kwargs))
