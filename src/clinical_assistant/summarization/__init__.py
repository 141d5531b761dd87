from .bedrock import SoapSummarizer, chunk_text, merge_chunk_summaries, parse_soap_response

__all__ = ["SoapSummarizer", "chunk_text", "merge_chunk_summaries", "parse_soap_response"]
