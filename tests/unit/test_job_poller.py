"""Unit tests for Transcribe Medical job polling, listing and deletion."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from clinical_assistant.transcription.models import JobStatus, TranscriptionJob, job_status_from_service
from clinical_assistant.transcription.poller import TranscriptionJobPoller


def _job(name: str, status: str, **extra) -> dict:
    return {"MedicalTranscriptionJobName": name, "TranscriptionJobStatus": status, **extra}


class TestPoll:
    @pytest.mark.parametrize("service,expected", [
        ("QUEUED", JobStatus.SUBMITTED),
        ("IN_PROGRESS", JobStatus.IN_PROGRESS),
        ("COMPLETED", JobStatus.COMPLETED),
        ("FAILED", JobStatus.FAILED),
    ])
    def test_status_mapping(self, config, service, expected) -> None:
        client = MagicMock()
        client.get_medical_transcription_job.return_value = {"MedicalTranscriptionJob": _job("visit-001", service)}
        job = TranscriptionJobPoller(config, client=client).poll("visit-001")

        client.get_medical_transcription_job.assert_called_once_with(MedicalTranscriptionJobName="visit-001")
        assert job.status == expected
        assert job.transcript_key == "transcripts/visit-001.json"

    def test_failure_reason(self, config) -> None:
        client = MagicMock()
        client.get_medical_transcription_job.return_value = {
            "MedicalTranscriptionJob": _job("visit-001", "FAILED", FailureReason="Unsupported media format")
        }
        job = TranscriptionJobPoller(config, client=client).poll("visit-001")
        assert job.is_terminal
        assert job.failure_reason == "Unsupported media format"

    def test_missing_name_filled_in(self, config) -> None:
        client = MagicMock()
        client.get_medical_transcription_job.return_value = {}
        job = TranscriptionJobPoller(config, client=client).poll("visit-001")
        assert job.job_name == "visit-001"
        assert job.status == JobStatus.IN_PROGRESS

    def test_unknown_status_is_in_progress(self) -> None:
        assert job_status_from_service("SOMETHING_NEW") == JobStatus.IN_PROGRESS
        assert job_status_from_service(None) == JobStatus.IN_PROGRESS


class TestListJobs:
    def test_filters_and_pagination(self, config) -> None:
        client = MagicMock()
        client.list_medical_transcription_jobs.return_value = {
            "MedicalTranscriptionJobSummaries": [
                _job("visit-001", "COMPLETED"),
                _job("visit-002", "QUEUED"),
                {"TranscriptionJobStatus": "COMPLETED"},
            ],
            "NextToken": "page-2",
        }
        page = TranscriptionJobPoller(config, client=client).list_jobs(
            name_contains="visit", status=JobStatus.SUBMITTED, max_results=10
        )

        client.list_medical_transcription_jobs.assert_called_once_with(
            JobNameContains="visit", MaxResults=10, Status="QUEUED"
        )
        assert [j.job_name for j in page.jobs] == ["visit-001", "visit-002"]
        assert page.jobs[1].status == JobStatus.SUBMITTED
        assert page.next_token == "page-2"

    @pytest.mark.parametrize("status", [None, "ALL", "all"])
    def test_no_status_filter(self, config, status) -> None:
        client = MagicMock()
        client.list_medical_transcription_jobs.return_value = {}
        page = TranscriptionJobPoller(config, client=client).list_jobs(status=status)
        client.list_medical_transcription_jobs.assert_called_once_with()
        assert page.jobs == []
        assert page.next_token is None

    def test_next_token_forwarded(self, config) -> None:
        client = MagicMock()
        client.list_medical_transcription_jobs.return_value = {}
        TranscriptionJobPoller(config, client=client).list_jobs(status="completed", next_token="abc")
        client.list_medical_transcription_jobs.assert_called_once_with(NextToken="abc", Status="COMPLETED")


class TestDeleteJob:
    def test_delete(self, config) -> None:
        client = MagicMock()
        TranscriptionJobPoller(config, client=client).delete_job("visit-001")
        client.delete_medical_transcription_job.assert_called_once_with(MedicalTranscriptionJobName="visit-001")


class TestTranscriptionJobModel:
    def test_from_service_reads_media_uri(self) -> None:
        job = TranscriptionJob.from_service(
            _job("visit-001", "COMPLETED", Media={"MediaFileUri": "s3://b/k.wav"}, LanguageCode="en-GB")
        )
        assert job.media_uri == "s3://b/k.wav"
        assert job.language_code == "en-GB"
        assert job.is_terminal
