"""Unit tests for Comprehend Medical entity extraction."""

from __future__ import annotations

import asyncio

from clinical_assistant.entities.comprehend import (
    ALL_ONTOLOGIES,
    EntityExtractor,
    ExtractionResult,
    Ontology,
    billing_units,
    clean_fragment,
    filter_by_confidence,
)
from clinical_assistant.normalizer.sections import build_soap_sections
from tests.fixtures.aws import client_error, make_comprehend_client


ICD_ENTITY = {"Id": 5, "Text": "headache", "Category": "MEDICAL_CONDITION", "Score": 0.8,
              "ICD10CMConcepts": [{"Code": "R51.9", "Description": "Headache, unspecified", "Score": 0.8}]}
SNOMED_ENTITY = {"Id": 6, "Text": "headache", "Category": "MEDICAL_CONDITION", "Score": 0.7,
                 "SNOMEDCTConcepts": [{"Code": "25064002", "Description": "Headache", "Score": 0.7}]}


class TestDetect:
    def test_default_ontology_only(self, config, entities_response) -> None:
        client = make_comprehend_client(entities_response["Entities"])
        result = asyncio.run(EntityExtractor(config, client=client).detect("I have a headache"))

        client.detect_entities_v2.assert_called_once_with(Text="I have a headache")
        client.infer_icd10_cm.assert_not_called()
        assert list(result.by_ontology) == [Ontology.ENTITIES]
        assert len(result.entities) == 2

    def test_failed_ontology_does_not_abort_others(self, config) -> None:
        client = make_comprehend_client()
        client.infer_icd10_cm.return_value = {"Entities": [ICD_ENTITY]}
        client.infer_snomedct.return_value = {"Entities": [SNOMED_ENTITY]}
        client.infer_rx_norm.side_effect = client_error("InternalServerException", "InferRxNorm")

        result = asyncio.run(
            EntityExtractor(config, client=client).detect(
                "headache", (Ontology.ICD10CM, Ontology.RXNORM, Ontology.SNOMEDCT)
            )
        )
        assert set(result.by_ontology) == {Ontology.ICD10CM, Ontology.SNOMEDCT}
        assert result.by_ontology[Ontology.ICD10CM] == [ICD_ENTITY]

    def test_unexpected_error_does_not_abort_others(self, config) -> None:
        client = make_comprehend_client()
        client.infer_icd10_cm.return_value = {"Entities": [ICD_ENTITY]}
        client.infer_snomedct.return_value = {"Entities": [SNOMED_ENTITY]}
        client.infer_rx_norm.side_effect = RuntimeError("connection pool closed")

        result = asyncio.run(
            EntityExtractor(config, client=client).detect(
                "headache", (Ontology.ICD10CM, Ontology.RXNORM, Ontology.SNOMEDCT)
            )
        )
        assert set(result.by_ontology) == {Ontology.ICD10CM, Ontology.SNOMEDCT}
        assert result.entities == [ICD_ENTITY, SNOMED_ENTITY]

    def test_empty_results_dropped(self, config) -> None:
        client = make_comprehend_client()
        result = asyncio.run(EntityExtractor(config, client=client).detect("hello", ALL_ONTOLOGIES))
        assert result.by_ontology == {}
        assert result.as_response() == {"Entities": []}

    def test_blank_text_makes_no_calls(self, config) -> None:
        client = make_comprehend_client()
        result = asyncio.run(EntityExtractor(config, client=client).detect("   ", ALL_ONTOLOGIES))
        assert result.entities == []
        client.detect_entities_v2.assert_not_called()

    def test_duplicate_ontologies_called_once(self, config) -> None:
        client = make_comprehend_client([{"Id": 0, "Score": 0.9}])
        asyncio.run(EntityExtractor(config, client=client).detect("x", (Ontology.ENTITIES, Ontology.ENTITIES)))
        assert client.detect_entities_v2.call_count == 1

    def test_entities_combined_in_request_order(self) -> None:
        result = ExtractionResult(by_ontology={
            Ontology.ENTITIES: [{"Id": 0}],
            Ontology.ICD10CM: [{"Id": 1}, {"Id": 2}],
        })
        assert [e["Id"] for e in result.entities] == [0, 1, 2]


class TestDetectSections:
    def test_one_result_per_fragment(self, config) -> None:
        client = make_comprehend_client([{"Id": 0, "Text": "knee", "Score": 0.9}])
        sections = build_soap_sections({"Subjective": "- Knee pain\n* Swelling", "Plan": "Rest"})

        extracted = asyncio.run(EntityExtractor(config, client=client).detect_sections(sections))

        assert [s.section_name for s in extracted] == ["SUBJECTIVE", "PLAN"]
        assert len(extracted[0].extracted) == 2
        texts = [c.kwargs["Text"] for c in client.detect_entities_v2.call_args_list]
        assert texts == ["Knee pain", "Swelling", "Rest"]


class TestHelpers:
    def test_filter_by_confidence_default_threshold(self) -> None:
        entities = [{"Score": 0.9}, {"Score": 0.75}, {"Score": 0.7499}, {}, {"Score": "bad"}]
        assert filter_by_confidence(entities) == [{"Score": 0.9}, {"Score": 0.75}]

    def test_filter_by_confidence_custom_threshold(self) -> None:
        assert filter_by_confidence([{"Score": 0.5}], threshold=50) == [{"Score": 0.5}]
        assert filter_by_confidence([{"Score": 0.5}], threshold=51) == []

    def test_billing_units(self) -> None:
        assert billing_units("") == 0
        assert billing_units("a") == 1
        assert billing_units("a" * 100) == 1
        assert billing_units("a" * 101) == 2

    def test_clean_fragment(self) -> None:
        assert clean_fragment("  - Knee pain ") == "Knee pain"
        assert clean_fragment("• Swelling") == "Swelling"
        assert clean_fragment("Rest") == "Rest"
