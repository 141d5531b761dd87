"""Explicit job-status polling for Transcribe Medical.

A single ``poll()`` performs one GetMedicalTranscriptionJob call and maps the
service status onto JobStatus (SUBMITTED, IN_PROGRESS, COMPLETED, FAILED).
The transcript artifact should only be fetched once a job is COMPLETED.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import AssistantConfig
from ..storage import transcript_key
from .models import JobPage, JobStatus, TranscriptionJob


logger = logging.getLogger(__name__)


class TranscriptionJobPoller:
    """Status queries, listing and deletion of medical transcription jobs."""

    def __init__(self, config: AssistantConfig, client: Any = None) -> None:
        self._client = client or config.client("transcribe")

    def poll(self, job_name: str) -> TranscriptionJob:
        """Query the job once and return its current state."""
        response = self._client.get_medical_transcription_job(
            MedicalTranscriptionJobName=job_name
        )
        job = TranscriptionJob.from_service(
            response.get("MedicalTranscriptionJob") or {},
            transcript_key=transcript_key(job_name),
        )
        if not job.job_name:
            job = job.model_copy(update={"job_name": job_name})
        logger.info("Transcription job %s status: %s", job_name, job.status.value)
        return job

    def list_jobs(
        self,
        name_contains: str | None = None,
        status: JobStatus | str | None = None,
        max_results: int | None = None,
        next_token: str | None = None,
    ) -> JobPage:
        """List medical transcription jobs, newest first as returned by the service.

        ``status`` may be a JobStatus, a raw service status, or ``"ALL"`` / None
        for no filter.
        """
        params: dict[str, Any] = {}
        if name_contains:
            params["JobNameContains"] = name_contains
        if max_results:
            params["MaxResults"] = max_results
        if next_token:
            params["NextToken"] = next_token
        service_status = _service_status(status)
        if service_status:
            params["Status"] = service_status

        response = self._client.list_medical_transcription_jobs(**params)
        jobs = []
        for summary in response.get("MedicalTranscriptionJobSummaries") or []:
            name = summary.get("MedicalTranscriptionJobName")
            if not name:
                continue
            jobs.append(TranscriptionJob.from_service(summary, transcript_key=transcript_key(name)))
        return JobPage(jobs=jobs, next_token=response.get("NextToken"))

    def delete_job(self, job_name: str) -> None:
        self._client.delete_medical_transcription_job(MedicalTranscriptionJobName=job_name)
        logger.info("Deleted transcription job %s", job_name)


def _service_status(status: JobStatus | str | None) -> str | None:
    if status is None:
        return None
    value = status.value if isinstance(status, JobStatus) else str(status).upper()
    if value == "ALL":
        return None
    if value == JobStatus.SUBMITTED.value:
        return "QUEUED"
    return value
