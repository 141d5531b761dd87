"""Pydantic models for Transcribe Medical job handles."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


# TranscriptionJobStatus values reported by Transcribe Medical
_SERVICE_STATUS = {
    "QUEUED": JobStatus.SUBMITTED,
    "IN_PROGRESS": JobStatus.IN_PROGRESS,
    "COMPLETED": JobStatus.COMPLETED,
    "FAILED": JobStatus.FAILED,
}


def job_status_from_service(value: str | None) -> JobStatus:
    """Map a TranscriptionJobStatus string onto JobStatus (unknown -> IN_PROGRESS)."""
    return _SERVICE_STATUS.get((value or "").upper(), JobStatus.IN_PROGRESS)


class TranscriptionJob(BaseModel):
    """Handle for one medical transcription job."""

    job_name: str = Field(..., description="MedicalTranscriptionJobName")
    status: JobStatus = Field(default=JobStatus.SUBMITTED)
    media_uri: str = Field(default="", description="s3:// URI of the uploaded audio")
    transcript_key: str = Field(default="", description="Output key of the transcript JSON")
    language_code: str = Field(default="en-US")
    failure_reason: str | None = Field(default=None)
    creation_time: datetime | None = None
    start_time: datetime | None = None
    completion_time: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)

    @classmethod
    def from_service(cls, job: dict, transcript_key: str = "") -> "TranscriptionJob":
        """Build a handle from a MedicalTranscriptionJob / job summary dict."""
        return cls(
            job_name=job.get("MedicalTranscriptionJobName", ""),
            status=job_status_from_service(job.get("TranscriptionJobStatus")),
            media_uri=(job.get("Media") or {}).get("MediaFileUri", ""),
            transcript_key=transcript_key,
            language_code=job.get("LanguageCode") or "en-US",
            failure_reason=job.get("FailureReason"),
            creation_time=job.get("CreationTime"),
            start_time=job.get("StartTime"),
            completion_time=job.get("CompletionTime"),
        )


class JobPage(BaseModel):
    """One page of ListMedicalTranscriptionJobs results."""

    jobs: list[TranscriptionJob] = Field(default_factory=list)
    next_token: str | None = None
