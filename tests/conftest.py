"""Shared pytest fixtures and test markers.

Test tiers
----------
  unit        Fast, fully offline. boto3 clients are MagicMocks.

  integration Full conversation load against mocked S3, Transcribe,
              Bedrock and Comprehend Medical clients.

  quality     Property-based tests (Hypothesis) over the pure mapping,
              chunking and parsing functions.

  live        Real AWS calls. Skipped unless the required environment
              variables are set. See tests/live/conftest.py for guards.

Run specific tiers:
  pytest tests/unit tests/integration tests/quality   # offline only
  pytest tests/live -m live                           # live only
  pytest tests/ -v                                    # everything
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from clinical_assistant.config import AssistantConfig
from tests.fixtures.audio import write_silence_wav
from tests.fixtures.aws import punctuation, speaker_segment, transcribe_result, word

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast offline unit tests")
    config.addinivalue_line("markers", "integration: mock-based integration tests")
    config.addinivalue_line("markers", "quality: property-based tests")
    config.addinivalue_line("markers", "live: requires real AWS credentials (skipped by default)")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> AssistantConfig:
    return AssistantConfig(
        region="ap-southeast-2",
        bucket_name="clinical-assistant-test-bucket",
        credentials_provider=lambda: {
            "aws_access_key_id": "testing",
            "aws_secret_access_key": "testing",
        },
    )


# ---------------------------------------------------------------------------
# Transcribe Medical results
# ---------------------------------------------------------------------------

@pytest.fixture
def diarized_items() -> list[dict]:
    return [
        word("How", 0.5, 0.7),
        word("are", 0.7, 0.9),
        word("you", 0.9, 1.2),
        punctuation("?"),
        word("I", 2.0, 2.1),
        word("have", 2.1, 2.4),
        word("a", 2.4, 2.5),
        word("headache", 2.5, 3.1),
        punctuation("."),
        word("Take", 4.0, 4.3),
        word("ibuprofen", 4.3, 5.0),
    ]


@pytest.fixture
def diarized_result(diarized_items: list[dict]) -> dict:
    segments = [
        speaker_segment("spk_0", 0.5, 1.2),
        speaker_segment("spk_1", 2.0, 3.1),
        speaker_segment("spk_0", 4.0, 5.0),
    ]
    return transcribe_result(
        diarized_items,
        segments,
        transcript="How are you? I have a headache. Take ibuprofen",
    )


@pytest.fixture
def undiarized_result(diarized_items: list[dict]) -> dict:
    return transcribe_result(diarized_items, transcript="How are you? I have a headache. Take ibuprofen")


@pytest.fixture
def sample_transcribe_output() -> dict:
    with open(FIXTURES_DIR / "sample_transcribe_output.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Comprehend Medical entities
# ---------------------------------------------------------------------------

@pytest.fixture
def headache_entity() -> dict:
    return {
        "Id": 0,
        "BeginOffset": 22,
        "EndOffset": 30,
        "Score": 0.97,
        "Text": "headache",
        "Category": "MEDICAL_CONDITION",
        "Type": "DX_NAME",
        "Traits": [{"Name": "SYMPTOM", "Score": 0.91}],
        "Attributes": [],
    }


@pytest.fixture
def ibuprofen_entity() -> dict:
    return {
        "Id": 1,
        "BeginOffset": 37,
        "EndOffset": 46,
        "Score": 0.99,
        "Text": "ibuprofen",
        "Category": "MEDICATION",
        "Type": "GENERIC_NAME",
        "Traits": [],
        "Attributes": [
            {
                "Type": "ROUTE_OR_MODE",
                "Score": 0.6,
                "RelationshipScore": 0.8,
                "Id": 2,
                "BeginOffset": 32,
                "EndOffset": 36,
                "Text": "Take",
                "Category": "MEDICATION",
                "Traits": [],
            }
        ],
    }


@pytest.fixture
def entities_response(headache_entity: dict, ibuprofen_entity: dict) -> dict:
    return {"Entities": [headache_entity, ibuprofen_entity], "ModelVersion": "2.4.0"}


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

@pytest.fixture
def wav_file(tmp_path: Path) -> Path:
    return write_silence_wav(tmp_path / "knee.wav")
