"""Explicit runtime configuration for the AWS-backed adapters.

Every adapter receives an ``AssistantConfig`` at construction time. Nothing
below the edge of the application reads the process environment; the
settings object is the single place where ``CLINICAL_ASSISTANT_*`` variables
(or a ``.env`` file) are consulted.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import boto3
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REGION = "ap-southeast-2"
DEFAULT_MODEL_ID = "anthropic.claude-3-haiku-20240307-v1:0"
DEFAULT_CHUNK_SIZE = 10_000

CredentialsProvider = Callable[[], Mapping[str, str]]


class AssistantConfig(BaseSettings):
    """Region, bucket, credentials and model settings shared by all adapters."""

    model_config = SettingsConfigDict(
        env_prefix="CLINICAL_ASSISTANT_",
        env_file=".env",
        extra="ignore",
    )

    region: str = Field(default=DEFAULT_REGION, description="AWS region for every service client")
    bucket_name: str = Field(..., description="Bucket holding uploads, transcripts and summaries")
    credentials_provider: CredentialsProvider | None = Field(
        default=None,
        exclude=True,
        description="Returns boto3.Session keyword arguments (aws_access_key_id, ...)",
    )

    # Bedrock
    model_id: str = Field(default=DEFAULT_MODEL_ID)
    max_tokens: int = Field(default=2000, gt=0)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    # Transcribe Medical
    language_code: str = Field(default="en-US")
    specialty: str = Field(default="PRIMARYCARE")
    max_speaker_labels: int = Field(default=2, ge=2)

    def session(self) -> boto3.Session:
        """Build a boto3 session for the configured region and credentials."""
        credentials: dict[str, Any] = {}
        if self.credentials_provider is not None:
            credentials = dict(self.credentials_provider())
        return boto3.Session(region_name=self.region, **credentials)

    def client(self, service_name: str) -> Any:
        """Return a low-level boto3 client, e.g. ``config.client("s3")``."""
        return self.session().client(service_name)
