"""Example: load a finished conversation into a SOAP note view (or run in demo mode).

Usage:
    # Demo mode: mocked S3, Bedrock and Comprehend Medical:
    python examples/load_conversation.py

    # Real job:
    CLINICAL_ASSISTANT_BUCKET_NAME=<bucket> python examples/load_conversation.py job-name
"""

from __future__ import annotations

import asyncio
import io
import json
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Make sure the package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clinical_assistant.config import AssistantConfig
from clinical_assistant.conversation import ConversationLoader, ConversationView, LoadState, Notification
from clinical_assistant.entities import EntityExtractor, Ontology
from clinical_assistant.normalizer import format_transcript
from clinical_assistant.summarization import SoapSummarizer
from clinical_assistant.transcription import TranscriptionJobPoller, TranscriptStore


DEMO_TRANSCRIPT = {
    "jobName": "demo-visit",
    "results": {
        "transcripts": [{"transcript": "How long has the knee been swollen? About two weeks. I take ibuprofen."}],
        "speaker_labels": {
            "segments": [
                {"start_time": "0.3", "end_time": "2.1", "speaker_label": "spk_0"},
                {"start_time": "2.5", "end_time": "5.4", "speaker_label": "spk_1"},
            ]
        },
        "items": [
            {"start_time": start, "end_time": end, "type": "pronunciation",
             "alternatives": [{"content": content, "confidence": "0.99"}]}
            for content, start, end in [
                ("How", "0.3", "0.5"), ("long", "0.5", "0.7"), ("has", "0.7", "0.8"), ("the", "0.8", "0.9"),
                ("knee", "0.9", "1.2"), ("been", "1.2", "1.4"), ("swollen", "1.4", "2.1"),
                ("About", "2.5", "2.8"), ("two", "2.8", "3.0"), ("weeks", "3.0", "3.4"),
                ("I", "3.8", "3.9"), ("take", "3.9", "4.3"), ("ibuprofen", "4.3", "5.4"),
            ]
        ],
    },
}

DEMO_SOAP = {
    "Subjective": "Knee swelling for about two weeks\nTaking ibuprofen",
    "Objective": "Not documented in transcript.",
    "Assessment": "Knee effusion, cause undetermined",
    "Plan": "Not documented in transcript.",
}

DEMO_ENTITIES = [
    {"Id": 0, "BeginOffset": 16, "EndOffset": 20, "Score": 0.96, "Text": "knee",
     "Category": "ANATOMY", "Type": "SYSTEM_ORGAN_SITE"},
    {"Id": 1, "BeginOffset": 60, "EndOffset": 69, "Score": 0.99, "Text": "ibuprofen",
     "Category": "MEDICATION", "Type": "GENERIC_NAME"},
]


def _print_notification(notification: Notification) -> None:
    print(f"[{notification.type.upper()}] {notification.header}: {notification.content}")


def _print_view(view: ConversationView) -> None:
    print(f"State: {view.state.value}\n")
    if view.state != LoadState.READY:
        return
    print("Transcript:")
    print("-" * 50)
    print(format_transcript(view.document))
    print()
    for section in view.sections:
        print(section.section_name)
        for fragment in section.summary:
            print(f"  - {fragment.text}")
    print()
    print("Insights:")
    for insight in view.document.clinical_insights:
        print(f"  {insight.category}/{insight.type}: {insight.spans[0].content}")


def run_demo() -> None:
    """Run with mocked AWS clients; no account required."""
    print("=== Conversation Load Demo (mock mode) ===\n")
    config = AssistantConfig(bucket_name="demo-bucket")

    s3 = MagicMock()
    s3.get_object.side_effect = lambda **kwargs: {"Body": io.BytesIO(json.dumps(DEMO_TRANSCRIPT).encode())}
    bedrock = MagicMock()
    bedrock.invoke_model.side_effect = lambda **kwargs: {
        "body": io.BytesIO(json.dumps({"content": [{"type": "text", "text": json.dumps(DEMO_SOAP)}]}).encode())
    }
    comprehend = MagicMock()
    comprehend.detect_entities_v2.return_value = {"Entities": DEMO_ENTITIES}

    loader = ConversationLoader(
        store=TranscriptStore(config, client=s3),
        summarizer=SoapSummarizer(config, client=bedrock),
        extractor=EntityExtractor(config, client=comprehend),
        notify=_print_notification,
    )
    _print_view(asyncio.run(loader.load("demo-visit")))


def run_real(job_name: str) -> None:
    """Load a real job (requires CLINICAL_ASSISTANT_BUCKET_NAME and AWS credentials)."""
    config = AssistantConfig()
    loader = ConversationLoader(
        store=TranscriptStore(config),
        summarizer=SoapSummarizer(config),
        extractor=EntityExtractor(config),
        poller=TranscriptionJobPoller(config),
        notify=_print_notification,
        ontologies=(Ontology.ENTITIES, Ontology.ICD10CM, Ontology.RXNORM),
    )
    _print_view(asyncio.run(loader.load(job_name)))


if __name__ == "__main__":
    if len(sys.argv) > 1:
        run_real(sys.argv[1])
    else:
        run_demo()
