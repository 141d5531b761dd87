from .comprehend import (
    ALL_ONTOLOGIES,
    EntityExtractor,
    ExtractionResult,
    Ontology,
    SectionEntities,
    billing_units,
    filter_by_confidence,
)

__all__ = [
    "ALL_ONTOLOGIES",
    "EntityExtractor",
    "ExtractionResult",
    "Ontology",
    "SectionEntities",
    "billing_units",
    "filter_by_confidence",
]
