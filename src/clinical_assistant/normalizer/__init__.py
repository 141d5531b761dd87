from .data_mapper import TranscriptNormalizer, transcript_text
from .models import (
    ClinicalInsight,
    NormalizedDocument,
    ParticipantRole,
    SoapSection,
    TranscriptItem,
    TranscriptSegment,
)
from .roles import FirstSeenRolePolicy, spk0_is_clinician
from .sections import build_soap_sections, format_transcript

__all__ = [
    "TranscriptNormalizer",
    "transcript_text",
    "ClinicalInsight",
    "NormalizedDocument",
    "ParticipantRole",
    "SoapSection",
    "TranscriptItem",
    "TranscriptSegment",
    "FirstSeenRolePolicy",
    "spk0_is_clinician",
    "build_soap_sections",
    "format_transcript",
]
