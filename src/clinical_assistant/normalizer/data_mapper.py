"""Maps raw Transcribe Medical and Comprehend Medical output to a NormalizedDocument.

Transcribe result shape (externally owned, every field below ``results`` optional):

    {"jobName": ..., "results": {
        "transcripts": [{"transcript": "..."}],
        "items": [{"start_time": "0.5", "end_time": "0.9", "type": "pronunciation",
                   "alternatives": [{"content": "Hello", "confidence": "0.99"}]}],
        "speaker_labels": {"segments": [{"start_time": "0.5", "end_time": "3.2",
                                         "speaker_label": "spk_0"}]}}}

Comprehend Medical entity shape:

    {"Id": 0, "Category": "MEDICAL_CONDITION", "Type": "DX_NAME", "Score": 0.98,
     "BeginOffset": 10, "EndOffset": 18, "Text": "headache",
     "Attributes": [{"Id": 1, "Type": "DOSAGE", "BeginOffset": ..., ...}],
     "Traits": [{"Name": "NEGATION", "Score": 0.9}]}
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..exceptions import TranscriptParseError
from .models import (
    Alternative,
    ClinicalInsight,
    InsightAttribute,
    ItemType,
    NormalizedDocument,
    ParticipantRole,
    Span,
    TranscriptItem,
    TranscriptSegment,
)
from .roles import RolePolicy, spk0_is_clinician


logger = logging.getLogger(__name__)

DEFAULT_CONVERSATION_ID = "conversation-1"


class TranscriptNormalizer:
    """Merge transcript items, diarization segments and entities into one document."""

    def __init__(self, role_policy: RolePolicy | type = spk0_is_clinician) -> None:
        self._role_policy = role_policy

    def normalize(
        self,
        raw_transcript: dict | str | bytes,
        raw_entities: dict | list | None = None,
        conversation_id: str | None = None,
        language_code: str = "en-US",
    ) -> NormalizedDocument:
        """Build a NormalizedDocument from raw service output.

        Args:
            raw_transcript: Transcribe result JSON (dict, or a JSON string/bytes).
            raw_entities: ``{"Entities": [...]}`` or a bare entity list.
            conversation_id: Defaults to the result's ``jobName``.
            language_code: Language of the conversation.

        Raises:
            TranscriptParseError: if the payload is not JSON or has no ``results``.
        """
        transcript = _load_transcript(raw_transcript)
        results = transcript["results"]

        items = [map_item(raw) for raw in _as_list(results.get("items"))]
        segments = self._map_segments(results, items)
        fallback_segment = segments[0].segment_id

        insights = [
            map_entity(entity, index, fallback_segment)
            for index, entity in enumerate(_entity_list(raw_entities))
            if isinstance(entity, dict)
        ]

        document = NormalizedDocument(
            conversation_id=conversation_id or str(transcript.get("jobName") or DEFAULT_CONVERSATION_ID),
            language_code=language_code,
            transcript_segments=segments,
            transcript_items=items,
            clinical_insights=insights,
        )
        logger.debug(
            "Normalized %s: %d items, %d segments, %d insights",
            document.conversation_id,
            len(items),
            len(segments),
            len(insights),
        )
        return document

    def _map_segments(self, results: dict, items: list[TranscriptItem]) -> list[TranscriptSegment]:
        speaker_labels = results.get("speaker_labels")
        raw_segments = _as_list(speaker_labels.get("segments")) if isinstance(speaker_labels, dict) else []
        raw_segments = [s for s in raw_segments if isinstance(s, dict)]

        if not raw_segments:
            return [_single_segment(results, items)]

        policy = self._role_policy() if isinstance(self._role_policy, type) else self._role_policy
        spoken = [item for item in items if not item.is_punctuation]
        segments = []
        for index, raw in enumerate(raw_segments):
            begin = parse_time(raw.get("start_time"))
            end = parse_time(raw.get("end_time"))
            # closed containment: an item straddling a boundary belongs to neither segment
            words = [
                item.content
                for item in spoken
                if item.begin_audio_time >= begin and item.end_audio_time <= end
            ]
            segments.append(
                TranscriptSegment(
                    segment_id=f"seg-{index}",
                    begin_audio_time=begin,
                    end_audio_time=end,
                    content=" ".join(words),
                    participant_role=policy(str(raw.get("speaker_label") or "")),
                )
            )
        return segments


def map_item(raw: Any) -> TranscriptItem:
    """Map one raw Transcribe item; never raises."""
    if not isinstance(raw, dict):
        return TranscriptItem()
    alternatives = [
        Alternative(content=str(alt.get("content") or ""), confidence=parse_confidence(alt.get("confidence")))
        for alt in _as_list(raw.get("alternatives"))
        if isinstance(alt, dict)
    ]
    first = alternatives[0] if alternatives else Alternative()
    return TranscriptItem(
        begin_audio_time=parse_time(raw.get("start_time")),
        end_audio_time=parse_time(raw.get("end_time")),
        type=ItemType.PUNCTUATION if raw.get("type") == "punctuation" else ItemType.PRONUNCIATION,
        content=first.content,
        confidence=first.confidence,
        alternatives=alternatives,
    )


def map_entity(entity: dict, index: int, segment_id: str) -> ClinicalInsight:
    """Map one Comprehend Medical entity, locating it in ``segment_id``.

    Entities without an ``Id`` get the index-based id ``insight-<index>``.
    """
    entity_id = entity.get("Id")
    insight_id = str(entity_id) if entity_id is not None else f"insight-{index}"
    entity_span = _span(entity, segment_id)

    attributes = []
    for attr_index, attr in enumerate(_as_list(entity.get("Attributes"))):
        if not isinstance(attr, dict):
            continue
        attr_id = attr.get("Id")
        attributes.append(
            InsightAttribute(
                attribute_id=str(attr_id) if attr_id is not None else f"{insight_id}-attr-{attr_index}",
                type=str(attr.get("Type") or ""),
                score=_score(attr.get("Score")),
                spans=[_span(attr, segment_id)],
            )
        )
    # traits carry no offsets of their own; they qualify the entity's text
    for trait_index, trait in enumerate(_as_list(entity.get("Traits"))):
        if not isinstance(trait, dict):
            continue
        attributes.append(
            InsightAttribute(
                attribute_id=f"{insight_id}-trait-{trait_index}",
                type=str(trait.get("Name") or ""),
                score=_score(trait.get("Score")),
                spans=[entity_span],
            )
        )

    category = str(entity.get("Category") or "")
    return ClinicalInsight(
        insight_id=insight_id,
        category=category,
        type=str(entity.get("Type") or ""),
        insight_type=category,
        score=_score(entity.get("Score")),
        spans=[entity_span],
        attributes=attributes,
    )


def transcript_text(raw_transcript: dict) -> str:
    """Full transcript text (``results.transcripts[0].transcript``), or ``""``."""
    results = raw_transcript.get("results") if isinstance(raw_transcript, dict) else None
    if not isinstance(results, dict):
        return ""
    transcripts = _as_list(results.get("transcripts"))
    if not transcripts or not isinstance(transcripts[0], dict):
        return ""
    return str(transcripts[0].get("transcript") or "")


def parse_time(value: Any) -> float:
    """Parse a Transcribe time string; absent or malformed values become 0.0."""
    if value is None or value == "":
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if parsed == parsed else 0.0  # NaN


def parse_confidence(value: Any) -> float:
    """Parse a confidence score, defaulting to 1.0 and clamping into [0, 1]."""
    if value is None or value == "":
        return 1.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 1.0
    if parsed != parsed:
        return 1.0
    return min(max(parsed, 0.0), 1.0)


def _single_segment(results: dict, items: list[TranscriptItem]) -> TranscriptSegment:
    return TranscriptSegment(
        segment_id="seg-0",
        begin_audio_time=items[0].begin_audio_time if items else 0.0,
        end_audio_time=items[-1].end_audio_time if items else 0.0,
        content=transcript_text({"results": results}),
        participant_role=ParticipantRole.CLINICIAN,
    )


def _span(record: dict, segment_id: str) -> Span:
    return Span(
        begin_character_offset=_offset(record.get("BeginOffset")),
        end_character_offset=_offset(record.get("EndOffset")),
        content=str(record.get("Text") or ""),
        segment_id=segment_id,
    )


def _offset(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _score(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _entity_list(raw_entities: dict | list | None) -> list:
    if isinstance(raw_entities, dict):
        return _as_list(raw_entities.get("Entities"))
    return _as_list(raw_entities)


def _load_transcript(raw: dict | str | bytes) -> dict:
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise TranscriptParseError(f"Transcription result is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict) or not isinstance(raw.get("results"), dict):
        raise TranscriptParseError("Transcription result has no 'results' object")
    return raw
