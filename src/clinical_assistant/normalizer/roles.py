"""Two-party speaker-to-role policies.

A role policy is any callable ``(speaker_label) -> ParticipantRole``. The
normalizer calls it once per diarization segment, in segment order.
"""

from __future__ import annotations

from collections.abc import Callable

from .models import ParticipantRole


RolePolicy = Callable[[str], ParticipantRole]

CLINICIAN_LABEL = "spk_0"


def spk0_is_clinician(speaker_label: str) -> ParticipantRole:
    """Transcribe's canonical first tag (``spk_0``) is the clinician."""
    if speaker_label == CLINICIAN_LABEL:
        return ParticipantRole.CLINICIAN
    return ParticipantRole.PATIENT


class FirstSeenRolePolicy:
    """Whoever speaks first is the clinician; every other label is the patient.

    Holds per-conversation state, so build a fresh instance (or pass the class
    itself as a factory to TranscriptNormalizer) for each document.
    """

    def __init__(self) -> None:
        self._clinician: str | None = None

    def __call__(self, speaker_label: str) -> ParticipantRole:
        if self._clinician is None:
            self._clinician = speaker_label
        if speaker_label == self._clinician:
            return ParticipantRole.CLINICIAN
        return ParticipantRole.PATIENT
