from .batch import BatchTranscriber
from .poller import TranscriptionJobPoller
from .store import TranscriptStore
from .models import JobPage, JobStatus, TranscriptionJob

__all__ = [
    "BatchTranscriber",
    "TranscriptionJobPoller",
    "TranscriptStore",
    "JobPage",
    "JobStatus",
    "TranscriptionJob",
]
