"""Medical entity extraction with Amazon Comprehend Medical.

One call per requested ontology, issued concurrently. A failing ontology is
logged and contributes nothing; the others still return.
"""

from __future__ import annotations

import asyncio
import logging
import math
from enum import Enum
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, Field

from ..config import AssistantConfig
from ..normalizer.models import SoapSection


logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 75.0
UNIT_SIZE = 100


class Ontology(str, Enum):
    ENTITIES = "ENTITIES"
    ICD10CM = "ICD10CM"
    RXNORM = "RXNORM"
    SNOMEDCT = "SNOMEDCT"


_OPERATIONS = {
    Ontology.ENTITIES: "detect_entities_v2",
    Ontology.ICD10CM: "infer_icd10_cm",
    Ontology.RXNORM: "infer_rx_norm",
    Ontology.SNOMEDCT: "infer_snomedct",
}

ALL_ONTOLOGIES = tuple(Ontology)


class ExtractionResult(BaseModel):
    """Entities grouped by the ontology that produced them.

    Only ontologies that returned at least one entity appear in ``by_ontology``.
    """

    by_ontology: dict[Ontology, list[dict]] = Field(default_factory=dict)

    @property
    def entities(self) -> list[dict]:
        combined: list[dict] = []
        for entities in self.by_ontology.values():
            combined.extend(entities)
        return combined

    def as_response(self) -> dict[str, list[dict]]:
        """The DetectEntitiesV2-style ``{"Entities": [...]}`` shape."""
        return {"Entities": self.entities}


class SectionEntities(BaseModel):
    section_name: str
    extracted: list[ExtractionResult] = Field(default_factory=list)


class EntityExtractor:
    """Detect medical entities, optionally across several ontologies."""

    def __init__(self, config: AssistantConfig, client: Any = None) -> None:
        self._client = client or config.client("comprehendmedical")

    async def detect(
        self,
        text: str,
        ontologies: tuple[Ontology, ...] | list[Ontology] = (Ontology.ENTITIES,),
    ) -> ExtractionResult:
        """Run every requested ontology concurrently and combine the non-empty results."""
        if not text or not text.strip():
            return ExtractionResult()

        requested = list(dict.fromkeys(ontologies))
        results = await asyncio.gather(
            *(asyncio.to_thread(self._call, ontology, text) for ontology in requested)
        )
        return ExtractionResult(
            by_ontology={
                ontology: entities
                for ontology, entities in zip(requested, results)
                if entities
            }
        )

    async def detect_sections(
        self,
        sections: list[SoapSection],
        ontologies: tuple[Ontology, ...] | list[Ontology] = (Ontology.ENTITIES,),
    ) -> list[SectionEntities]:
        """Extract entities from every summarized fragment, section by section."""
        extracted = []
        for section in sections:
            per_fragment = []
            for fragment in section.summary:
                per_fragment.append(await self.detect(clean_fragment(fragment.text), ontologies))
            extracted.append(SectionEntities(section_name=section.section_name, extracted=per_fragment))
        return extracted

    def _call(self, ontology: Ontology, text: str) -> list[dict]:
        operation = getattr(self._client, _OPERATIONS[ontology])
        try:
            response = operation(Text=text)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("Comprehend Medical %s call failed: %s", ontology.value, exc)
            return []
        except Exception:
            # one ontology must never fail the others
            logger.exception("Unexpected error from Comprehend Medical %s", ontology.value)
            return []
        entities = response.get("Entities") if isinstance(response, dict) else None
        if not isinstance(entities, list):
            return []
        return [e for e in entities if isinstance(e, dict)]


def filter_by_confidence(entities: list[dict], threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> list[dict]:
    """Keep entities whose Score, as a percentage, meets ``threshold``."""
    kept = []
    for entity in entities:
        try:
            score = float(entity.get("Score", 0.0))
        except (TypeError, ValueError):
            continue
        if score * 100 >= threshold:
            kept.append(entity)
    return kept


def billing_units(text: str) -> int:
    """Comprehend Medical units (100 characters each) consumed by ``text``."""
    return math.ceil(len(text) / UNIT_SIZE)


def clean_fragment(text: str) -> str:
    """Strip list bullets and surrounding whitespace from a summary fragment."""
    return text.strip().lstrip("-*•").strip()
