"""Conversation load: transcript -> (summary || entities) -> normalized document.

Per view the load follows ``IDLE -> LOADING -> READY | NOT_READY | FAILED``.
NOT_READY and FAILED end the attempt; a new attempt starts only when the
caller invokes ``load()`` again. A failed attempt leaves any previously
loaded document and summary on the view untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Literal

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from ..entities.comprehend import EntityExtractor, Ontology
from ..exceptions import (
    ClinicalAssistantError,
    TranscriptionJobFailedError,
    TranscriptNotReadyError,
)
from ..normalizer.data_mapper import TranscriptNormalizer, transcript_text
from ..normalizer.models import NormalizedDocument, SoapSection
from ..normalizer.sections import ERROR_KEY, build_soap_sections
from ..summarization.bedrock import SoapSummarizer
from ..transcription.models import JobStatus
from ..transcription.poller import TranscriptionJobPoller
from ..transcription.store import TranscriptStore


logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    READY = "READY"
    NOT_READY = "NOT_READY"
    FAILED = "FAILED"


class Notification(BaseModel):
    """A user-visible flash message."""

    id: str
    header: str
    content: str
    type: Literal["info", "error", "success"] = "info"


Notifier = Callable[[Notification], None]


class ConversationView(BaseModel):
    """Everything the presentation layer renders for one conversation."""

    job_name: str
    state: LoadState = LoadState.IDLE
    document: NormalizedDocument | None = None
    summary: dict[str, Any] | None = None
    sections: list[SoapSection] = Field(default_factory=list)
    error: str | None = None


class ConversationLoader:
    """Sequence the store, summarizer, extractor and normalizer for one view."""

    def __init__(
        self,
        store: TranscriptStore,
        summarizer: SoapSummarizer,
        extractor: EntityExtractor,
        normalizer: TranscriptNormalizer | None = None,
        poller: TranscriptionJobPoller | None = None,
        notify: Notifier | None = None,
        ontologies: tuple[Ontology, ...] = (Ontology.ENTITIES,),
        cache_summary: bool = True,
    ) -> None:
        self._store = store
        self._summarizer = summarizer
        self._extractor = extractor
        self._normalizer = normalizer or TranscriptNormalizer()
        self._poller = poller
        self._notify = notify
        self._ontologies = ontologies
        self._cache_summary = cache_summary

    async def load(self, job_name: str, view: ConversationView | None = None) -> ConversationView:
        """Load (or reload) a conversation into ``view``.

        Never raises for service or payload failures; the outcome is reported
        through ``view.state`` and the notifier.
        """
        view = view or ConversationView(job_name=job_name)
        view.job_name = job_name
        view.state = LoadState.LOADING
        view.error = None
        logger.info("Loading conversation %s", job_name)

        try:
            document, summary = await self._run(job_name)
        except TranscriptNotReadyError as exc:
            view.state = LoadState.NOT_READY
            view.error = str(exc)
            logger.info("Conversation %s not ready: %s", job_name, exc)
            self._publish(
                Notification(
                    id="Job Processing",
                    header="Job still processing",
                    content="The transcript is not ready yet. Please try again later.",
                    type="info",
                )
            )
            return view
        except (ClinicalAssistantError, ClientError, BotoCoreError) as exc:
            view.state = LoadState.FAILED
            view.error = str(exc)
            logger.error("Loading conversation %s failed: %s", job_name, exc)
            self._publish(
                Notification(
                    id="Load Error",
                    header="Error loading data",
                    content=str(exc) or "Unknown error",
                    type="error",
                )
            )
            return view

        view.document = document
        view.summary = summary
        view.sections = build_soap_sections(summary, document)
        view.state = LoadState.READY

        if self._cache_summary and ERROR_KEY not in summary:
            await self._save_summary(job_name, summary)
        return view

    async def _run(self, job_name: str) -> tuple[NormalizedDocument, dict]:
        if self._poller is not None:
            job = await asyncio.to_thread(self._poller.poll, job_name)
            if job.status == JobStatus.FAILED:
                raise TranscriptionJobFailedError(job_name, job.failure_reason)
            if job.status != JobStatus.COMPLETED:
                raise TranscriptNotReadyError(job_name, f"job status is {job.status.value}")

        raw_transcript = await asyncio.to_thread(self._store.fetch_transcript, job_name)
        text = transcript_text(raw_transcript)

        summary, extraction = await asyncio.gather(
            self._summarizer.summarize(text),
            self._extractor.detect(text, self._ontologies),
        )

        document = self._normalizer.normalize(
            raw_transcript,
            extraction.as_response(),
            conversation_id=job_name,
        )
        return document, summary

    async def _save_summary(self, job_name: str, summary: dict) -> None:
        try:
            await asyncio.to_thread(self._store.save_summary, job_name, summary)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("Could not cache summary for %s: %s", job_name, exc)

    def _publish(self, notification: Notification) -> None:
        if self._notify is not None:
            self._notify(notification)
