"""SOAP note generation with Amazon Bedrock (Anthropic messages API).

Long transcripts are split into fixed-size character chunks, each chunk is
summarized on its own, and the per-chunk notes are concatenated key by key.
Model output is free text that usually, but not always, holds one JSON
object; see parse_soap_response() for the recovery rules.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..config import AssistantConfig
from .prompt import build_soap_prompt


logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "bedrock-2023-05-31"
SOAP_KEYS = ("Subjective", "Objective", "Assessment", "Plan")
SUMMARY_ERROR = "Failed to generate summary. Please check logs."
UNPARSEABLE_OBJECTIVE = "Unable to parse structured response"

_FENCE_OPEN = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE = re.compile(r"```\s*")

# service failures, plus response bodies that are missing, unreadable or not UTF-8
_SUMMARY_FAILURES = (ClientError, BotoCoreError, KeyError, TypeError, AttributeError, UnicodeDecodeError)


class SoapSummarizer:
    """Summarize transcript text into a four-section SOAP note dict."""

    def __init__(self, config: AssistantConfig, client: Any = None) -> None:
        self._model_id = config.model_id
        self._max_tokens = config.max_tokens
        self._chunk_size = config.chunk_size
        self._client = client or config.client("bedrock-runtime")

    async def summarize(self, text: str) -> dict[str, str]:
        """Return ``{"Subjective": ..., "Objective": ..., "Assessment": ..., "Plan": ...}``.

        Never raises for service or payload failures: a failed Bedrock call yields
        ``{"Error": SUMMARY_ERROR}`` so callers can render a visible failure.
        """
        chunks = chunk_text(text, self._chunk_size)
        if len(chunks) > 1:
            logger.info("Summarizing transcript in %d chunks of %d characters", len(chunks), self._chunk_size)

        results = []
        try:
            for chunk in chunks:
                results.append(await asyncio.to_thread(self.summarize_chunk, chunk))
        except _SUMMARY_FAILURES as exc:
            logger.error("Bedrock summarization failed: %s", exc)
            return {"Error": SUMMARY_ERROR}

        return merge_chunk_summaries(results)

    def summarize_chunk(self, text: str) -> dict[str, str]:
        """One blocking invoke_model call for a single chunk."""
        body = {
            "anthropic_version": ANTHROPIC_VERSION,
            "max_tokens": self._max_tokens,
            "messages": [{"role": "user", "content": build_soap_prompt(text)}],
        }
        response = self._client.invoke_model(
            modelId=self._model_id,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(body),
        )
        raw = response["body"].read()
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return parse_soap_response(_response_text(raw))


def chunk_text(text: str, size: int = 10_000) -> list[str]:
    """Split text into consecutive chunks of at most ``size`` characters."""
    if size <= 0:
        raise ValueError("size must be positive")
    if len(text) <= size:
        return [text]
    return [text[i:i + size] for i in range(0, len(text), size)]


def merge_chunk_summaries(results: list[dict[str, Any]]) -> dict[str, str]:
    """Concatenate each key's text across chunk results with newlines.

    A single result is returned unchanged. Key order follows first appearance;
    no deduplication is attempted.
    """
    if len(results) == 1:
        return results[0]

    merged: dict[str, list[str]] = {}
    for result in results:
        for key, value in result.items():
            merged.setdefault(key, []).append(str(value))
    return {key: "\n".join(parts) for key, parts in merged.items()}


def parse_soap_response(text: str) -> dict[str, Any]:
    """Recover the SOAP JSON object from free-form model output.

    Code fences are stripped and the substring between the first ``{`` and
    the last ``}`` is parsed. Anything that still fails to parse is returned
    as a degraded note with the raw text under Subjective.
    """
    cleaned = _FENCE.sub("", _FENCE_OPEN.sub("", text or "")).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        cleaned = cleaned[start:end + 1]

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    logger.warning("SOAP response is not a JSON object; returning raw text as Subjective")
    return {
        "Subjective": cleaned,
        "Objective": UNPARSEABLE_OBJECTIVE,
        "Assessment": "",
        "Plan": "",
    }


def _response_text(raw_body: str) -> str:
    """Extract ``content[0].text`` from an Anthropic messages response body."""
    try:
        payload = json.loads(raw_body)
        return str(payload["content"][0]["text"])
    except (json.JSONDecodeError, KeyError, IndexError, TypeError):
        logger.warning("Unexpected Bedrock response body shape")
        return ""
