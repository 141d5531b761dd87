"""SOAP summary -> note sections, and a plain-text rendering of the transcript."""

from __future__ import annotations

from .models import EvidenceLink, NormalizedDocument, SoapSection, SummarizedSegment


SOAP_KEYS = ("Subjective", "Objective", "Assessment", "Plan")
ERROR_KEY = "Error"
DEFAULT_SEGMENT_ID = "seg-0"


def build_soap_sections(summary: dict | None, document: NormalizedDocument | None = None) -> list[SoapSection]:
    """Split a SOAP summary into sections of one-line fragments.

    Canonical sections come first in S-O-A-P order, followed by any other keys
    the model returned. Every non-blank line becomes one fragment linked to
    the document's first segment. A summary carrying ``Error`` yields nothing.
    """
    if not summary or ERROR_KEY in summary:
        return []

    segment_id = (document.first_segment_id if document else None) or DEFAULT_SEGMENT_ID
    extra_keys = [key for key in summary if key not in SOAP_KEYS]

    sections = []
    for key in (*SOAP_KEYS, *extra_keys):
        value = summary.get(key)
        if not value:
            continue
        lines = [line.strip() for line in str(value).split("\n") if line.strip()]
        if not lines:
            continue
        sections.append(
            SoapSection(
                section_name=key.upper().replace(" ", "_"),
                summary=[
                    SummarizedSegment(text=line, evidence_links=[EvidenceLink(segment_id=segment_id)])
                    for line in lines
                ],
            )
        )
    return sections


def format_transcript(document: NormalizedDocument) -> str:
    """Format segments as a readable clinical transcript."""
    segments = [s for s in document.transcript_segments if s.content]
    if not segments:
        return ""
    return "\n".join(
        f"[{s.begin_audio_time:.1f}s] {s.participant_role.value}: {s.content}" for s in segments
    )
