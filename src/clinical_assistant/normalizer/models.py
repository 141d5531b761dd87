"""Pydantic models for the normalized conversation document.

Field names are snake_case in Python; ``to_healthscribe()`` renders the
PascalCase shape the presentation layer was written against.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ParticipantRole(str, Enum):
    CLINICIAN = "CLINICIAN"
    PATIENT = "PATIENT"


class ItemType(str, Enum):
    PRONUNCIATION = "pronunciation"
    PUNCTUATION = "punctuation"


class Alternative(BaseModel):
    content: str = ""
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class TranscriptItem(BaseModel):
    """A single recognized token (word or punctuation mark)."""

    begin_audio_time: float = Field(default=0.0, description="Start time in seconds")
    end_audio_time: float = Field(default=0.0, description="End time in seconds")
    type: ItemType = Field(default=ItemType.PRONUNCIATION)
    content: str = Field(default="")
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    alternatives: list[Alternative] = Field(default_factory=list)

    @property
    def is_punctuation(self) -> bool:
        return self.type == ItemType.PUNCTUATION

    def to_healthscribe(self) -> dict[str, Any]:
        return {
            "BeginAudioTime": self.begin_audio_time,
            "EndAudioTime": self.end_audio_time,
            "Type": self.type.value,
            "Content": self.content,
            "Confidence": self.confidence,
            "Alternatives": [
                {"Content": a.content, "Confidence": a.confidence} for a in self.alternatives
            ],
        }


class TranscriptSegment(BaseModel):
    """A contiguous span attributed to one speaker role."""

    segment_id: str
    begin_audio_time: float = 0.0
    end_audio_time: float = 0.0
    content: str = ""
    participant_role: ParticipantRole = ParticipantRole.CLINICIAN
    section_name: str = "Transcript"

    def to_healthscribe(self) -> dict[str, Any]:
        return {
            "SegmentId": self.segment_id,
            "BeginAudioTime": self.begin_audio_time,
            "EndAudioTime": self.end_audio_time,
            "Content": self.content,
            "ParticipantDetails": {"ParticipantRole": self.participant_role.value},
            "SectionDetails": {"SectionName": self.section_name},
        }


class Span(BaseModel):
    begin_character_offset: int = 0
    end_character_offset: int = 0
    content: str = ""
    segment_id: str

    def to_healthscribe(self) -> dict[str, Any]:
        return {
            "BeginCharacterOffset": self.begin_character_offset,
            "EndCharacterOffset": self.end_character_offset,
            "Content": self.content,
            "SegmentId": self.segment_id,
        }


class InsightAttribute(BaseModel):
    """An entity attribute or trait, e.g. NEGATION or DOSAGE."""

    attribute_id: str
    type: str = ""
    score: float | None = None
    spans: list[Span] = Field(default_factory=list)

    def to_healthscribe(self) -> dict[str, Any]:
        return {
            "AttributeId": self.attribute_id,
            "Type": self.type,
            "Spans": [s.to_healthscribe() for s in self.spans],
        }


class ClinicalInsight(BaseModel):
    """A medical entity located in the transcript."""

    insight_id: str
    category: str = ""
    type: str = ""
    insight_type: str = ""
    score: float | None = None
    spans: list[Span] = Field(default_factory=list)
    attributes: list[InsightAttribute] = Field(default_factory=list)

    @property
    def segment_id(self) -> str | None:
        return self.spans[0].segment_id if self.spans else None

    def to_healthscribe(self) -> dict[str, Any]:
        # Category and Type are swapped relative to Comprehend Medical in the UI contract
        return {
            "InsightId": self.insight_id,
            "Type": self.category,
            "Category": self.type,
            "InsightType": self.insight_type,
            "Spans": [s.to_healthscribe() for s in self.spans],
            "Attributes": [a.to_healthscribe() for a in self.attributes],
        }


class EvidenceLink(BaseModel):
    segment_id: str


class SummarizedSegment(BaseModel):
    text: str
    evidence_links: list[EvidenceLink] = Field(default_factory=list, min_length=1)


class SoapSection(BaseModel):
    """One section of the clinical note (SUBJECTIVE, OBJECTIVE, ...)."""

    section_name: str
    summary: list[SummarizedSegment] = Field(default_factory=list)

    def to_healthscribe(self) -> dict[str, Any]:
        return {
            "SectionName": self.section_name,
            "Summary": [
                {
                    "SummarizedSegment": s.text,
                    "EvidenceLinks": [{"SegmentId": e.segment_id} for e in s.evidence_links],
                }
                for s in self.summary
            ],
        }


class NormalizedDocument(BaseModel):
    """Root aggregate handed to the presentation layer."""

    conversation_id: str = "conversation-1"
    language_code: str = "en-US"
    session_id: str = "1"
    transcript_segments: list[TranscriptSegment] = Field(default_factory=list)
    transcript_items: list[TranscriptItem] = Field(default_factory=list)
    clinical_insights: list[ClinicalInsight] = Field(default_factory=list)

    @property
    def first_segment_id(self) -> str | None:
        return self.transcript_segments[0].segment_id if self.transcript_segments else None

    def to_healthscribe(self) -> dict[str, Any]:
        return {
            "Conversation": {
                "ConversationId": self.conversation_id,
                "LanguageCode": self.language_code,
                "SessionId": self.session_id,
                "TranscriptSegments": [s.to_healthscribe() for s in self.transcript_segments],
                "TranscriptItems": [i.to_healthscribe() for i in self.transcript_items],
                "ClinicalInsights": [c.to_healthscribe() for c in self.clinical_insights],
            }
        }
