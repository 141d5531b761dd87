"""Example: upload a recording and start a Transcribe Medical job (or run in demo mode).

Usage:
    # Demo mode: no AWS account or audio file needed:
    python examples/batch_transcribe.py

    # Real file:
    CLINICAL_ASSISTANT_BUCKET_NAME=<bucket> python examples/batch_transcribe.py path/to/audio.wav job-name
"""

from __future__ import annotations

import sys
import tempfile
import wave
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

# Make sure the package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clinical_assistant.config import AssistantConfig
from clinical_assistant.transcription import BatchTranscriber, TranscriptionJobPoller


def run_demo() -> None:
    """Run against mocked S3 and Transcribe clients."""
    print("=== Batch Transcription Demo (mock mode) ===\n")

    config = AssistantConfig(bucket_name="demo-bucket")
    s3 = MagicMock()
    transcribe = MagicMock()
    transcribe.start_medical_transcription_job.return_value = {
        "MedicalTranscriptionJob": {"CreationTime": datetime.now(timezone.utc)}
    }
    transcribe.get_medical_transcription_job.return_value = {
        "MedicalTranscriptionJob": {
            "MedicalTranscriptionJobName": "demo-visit",
            "TranscriptionJobStatus": "IN_PROGRESS",
        }
    }

    with tempfile.TemporaryDirectory() as tmp:
        audio = Path(tmp) / "demo-visit.wav"
        with wave.open(str(audio), "w") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(16000)
            wav.writeframes(b"\x00\x00" * 1600)

        job = BatchTranscriber(config, s3_client=s3, transcribe_client=transcribe).transcribe_file(audio, "demo-visit")

    print(f"Uploaded to:    {job.media_uri}")
    print(f"Job:            {job.job_name} ({job.status.value})")
    print(f"Transcript key: {job.transcript_key}")
    print()
    print("Job parameters:")
    params = transcribe.start_medical_transcription_job.call_args.kwargs
    for key in ("LanguageCode", "MediaFormat", "Specialty", "Type", "Settings"):
        print(f"  {key}: {params[key]}")

    status = TranscriptionJobPoller(config, client=transcribe).poll("demo-visit")
    print()
    print(f"Polled status:  {status.status.value}")


def run_real(audio_path: str, job_name: str) -> None:
    """Upload and start a real job (requires CLINICAL_ASSISTANT_BUCKET_NAME and AWS credentials)."""
    print(f"=== Transcribing: {audio_path} ===\n")
    config = AssistantConfig()
    job = BatchTranscriber(config).transcribe_file(audio_path, job_name)
    print(f"Started {job.job_name}; transcript will be written to s3://{config.bucket_name}/{job.transcript_key}")


if __name__ == "__main__":
    if len(sys.argv) > 2:
        run_real(sys.argv[1], sys.argv[2])
    else:
        run_demo()
