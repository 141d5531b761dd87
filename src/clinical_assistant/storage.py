"""S3 key conventions shared by the writer (Transcribe) and the readers."""

from __future__ import annotations

import uuid


TRANSCRIPT_PREFIX = "transcripts"
UPLOAD_PREFIX = "uploads/HealthScribeDemo"
SUMMARY_SUFFIX = "_summary"


def transcript_key(job_name: str) -> str:
    """``transcripts/<job>.json``, the OutputKey handed to Transcribe Medical."""
    return f"{TRANSCRIPT_PREFIX}/{_require_name(job_name)}.json"


def summary_key(job_name: str) -> str:
    return f"{TRANSCRIPT_PREFIX}/{_require_name(job_name)}{SUMMARY_SUFFIX}.json"


def upload_key(filename: str, upload_id: str | None = None) -> str:
    """Key for an uploaded recording: ``uploads/HealthScribeDemo/<id>/<filename>``."""
    if not filename or not filename.strip():
        raise ValueError("filename must not be empty")
    return f"{UPLOAD_PREFIX}/{upload_id or uuid.uuid4()}/{filename}"


def job_name_from_key(key: str) -> str:
    """Recover the job name from a transcript or summary key.

    Raises:
        ValueError: if ``key`` was not built by transcript_key() or summary_key().
    """
    prefix = f"{TRANSCRIPT_PREFIX}/"
    if not key.startswith(prefix) or not key.endswith(".json"):
        raise ValueError(f"{key!r} is not a transcript or summary key")
    name = key[len(prefix):-len(".json")]
    if name.endswith(SUMMARY_SUFFIX):
        name = name[: -len(SUMMARY_SUFFIX)]
    if not name or "/" in name:
        raise ValueError(f"{key!r} is not a transcript or summary key")
    return name


def s3_uri(bucket: str, key: str) -> str:
    return f"s3://{bucket}/{key}"


def _require_name(job_name: str) -> str:
    if not job_name or not job_name.strip():
        raise ValueError("job_name must not be empty")
    return job_name
