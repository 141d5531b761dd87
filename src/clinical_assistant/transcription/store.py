"""Reads and writes conversation artifacts in the assistant's S3 bucket."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from botocore.exceptions import ClientError

from ..config import AssistantConfig
from ..exceptions import TranscriptNotReadyError, TranscriptParseError
from ..storage import summary_key, transcript_key, upload_key


logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


def is_not_found(exc: ClientError) -> bool:
    """True when an S3 ClientError means the object does not exist."""
    error = exc.response.get("Error", {}) if isinstance(exc.response, dict) else {}
    return str(error.get("Code", "")) in _NOT_FOUND_CODES


class TranscriptStore:
    """S3 access for transcripts, cached summaries and uploaded audio."""

    def __init__(self, config: AssistantConfig, client: Any = None) -> None:
        self._bucket = config.bucket_name
        self._client = client or config.client("s3")

    @property
    def bucket(self) -> str:
        return self._bucket

    def fetch_transcript(self, job_name: str) -> dict:
        """Download and parse ``transcripts/<job>.json``.

        Raises:
            TranscriptNotReadyError: the object does not exist (job still running).
            TranscriptParseError: the object is empty, not UTF-8, or not a JSON object.
            botocore.exceptions.ClientError: any other S3 failure.
        """
        key = transcript_key(job_name)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if is_not_found(exc):
                raise TranscriptNotReadyError(job_name, key) from exc
            raise

        body = response["Body"].read()
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise TranscriptParseError(f"Transcript file {key} is not UTF-8 text: {exc}") from exc
        if not body or not body.strip():
            raise TranscriptParseError(f"Transcript file {key} is empty")
        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            raise TranscriptParseError(f"Transcript file {key} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise TranscriptParseError(f"Transcript file {key} is not a JSON object")

        logger.info("Fetched transcript s3://%s/%s (%d bytes)", self._bucket, key, len(body))
        return data

    def save_summary(self, job_name: str, summary: dict) -> str:
        """Write the generated summary next to its transcript; returns the key."""
        key = summary_key(job_name)
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=json.dumps(summary, indent=2),
            ContentType="application/json",
        )
        return key

    def upload_audio(self, path: str | Path, upload_id: str | None = None) -> str:
        """Upload a recording under the uploads prefix; returns its key."""
        path = Path(path)
        key = upload_key(path.name, upload_id)
        with open(path, "rb") as audio:
            self._client.put_object(Bucket=self._bucket, Key=key, Body=audio.read())
        logger.info("Uploaded %s to s3://%s/%s", path.name, self._bucket, key)
        return key
