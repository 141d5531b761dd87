from __future__ import annotations


class ClinicalAssistantError(Exception):
    pass


class TranscriptNotReadyError(ClinicalAssistantError):
    """The transcription artifact does not exist yet; the job is still running."""

    def __init__(self, job_name: str, detail: str = "") -> None:
        self.job_name = job_name
        message = f"Transcript for job {job_name!r} is not ready yet"
        super().__init__(f"{message}: {detail}" if detail else message)


class TranscriptParseError(ClinicalAssistantError):
    """The top-level transcription result is absent or not valid JSON."""


class JobSubmissionError(ClinicalAssistantError):
    """Starting a transcription job or uploading its audio failed."""


class TranscriptionJobFailedError(ClinicalAssistantError):
    """Transcribe Medical reported the job as FAILED."""

    def __init__(self, job_name: str, reason: str | None = None) -> None:
        self.job_name = job_name
        self.reason = reason or "Unknown"
        super().__init__(f"Transcription job {job_name!r} failed: {self.reason}")
