"""Batch (pre-recorded) transcription using Amazon Transcribe Medical.

The recording is uploaded to the assistant bucket and a medical
transcription job is started with speaker labels enabled. The job runs
asynchronously on the service side; use TranscriptionJobPoller to follow it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..config import AssistantConfig
from ..exceptions import JobSubmissionError
from ..storage import s3_uri, transcript_key
from .models import JobStatus, TranscriptionJob
from .store import TranscriptStore


logger = logging.getLogger(__name__)

JOB_TAGS = [
    {"Key": "Solution", "Value": "AWS_CLINICAL_ASSISTANT_AU"},
    {"Key": "Environment", "Value": "Workshop"},
]


class BatchTranscriber:
    """Upload audio files and start Transcribe Medical conversation jobs."""

    def __init__(
        self,
        config: AssistantConfig,
        s3_client: Any = None,
        transcribe_client: Any = None,
    ) -> None:
        self._config = config
        self._store = TranscriptStore(config, client=s3_client)
        self._client = transcribe_client or config.client("transcribe")

    def transcribe_file(self, path: str | Path, job_name: str) -> TranscriptionJob:
        """Upload an audio file and start a medical transcription job.

        Args:
            path: Path to the audio file (WAV, MP3, FLAC, ...).
            job_name: MedicalTranscriptionJobName; also names the output
                      transcript ``transcripts/<job_name>.json``.

        Returns:
            TranscriptionJob handle in state SUBMITTED.

        Raises:
            ValueError: if job_name is blank.
            JobSubmissionError: if the upload or the job start fails.
        """
        if not job_name or not job_name.strip():
            raise ValueError("job_name must not be empty")

        path = Path(path)
        try:
            key = self._store.upload_audio(path)
        except (ClientError, BotoCoreError) as exc:
            raise JobSubmissionError(f"Upload of {path.name} failed: {exc}") from exc

        return self.transcribe_uri(s3_uri(self._store.bucket, key), job_name)

    def transcribe_uri(self, media_uri: str, job_name: str) -> TranscriptionJob:
        """Start a medical transcription job for audio already in S3."""
        if not job_name or not job_name.strip():
            raise ValueError("job_name must not be empty")

        output_key = transcript_key(job_name)
        try:
            response = self._client.start_medical_transcription_job(
                MedicalTranscriptionJobName=job_name,
                LanguageCode=self._config.language_code,
                MediaFormat=_media_format_for(media_uri),
                Media={"MediaFileUri": media_uri},
                OutputBucketName=self._store.bucket,
                OutputKey=output_key,
                Specialty=self._config.specialty,
                Type="CONVERSATION",
                Settings={
                    "ShowSpeakerLabels": True,
                    "MaxSpeakerLabels": self._config.max_speaker_labels,
                },
                Tags=JOB_TAGS,
            )
        except (ClientError, BotoCoreError) as exc:
            raise JobSubmissionError(f"Could not start job {job_name!r}: {exc}") from exc

        logger.info("Started medical transcription job %s for %s", job_name, media_uri)
        job = response.get("MedicalTranscriptionJob") or {}
        return TranscriptionJob(
            job_name=job_name,
            status=JobStatus.SUBMITTED,
            media_uri=media_uri,
            transcript_key=output_key,
            language_code=self._config.language_code,
            creation_time=job.get("CreationTime"),
        )


def _media_format_for(name: str | Path) -> str:
    """Return the Transcribe MediaFormat for common audio file extensions."""
    suffix = Path(str(name)).suffix.lower()
    mapping = {
        ".wav": "wav",
        ".mp3": "mp3",
        ".mp4": "mp4",
        ".m4a": "mp4",
        ".flac": "flac",
        ".ogg": "ogg",
        ".webm": "webm",
        ".amr": "amr",
    }
    return mapping.get(suffix, "wav")
