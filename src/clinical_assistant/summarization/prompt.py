SOAP_PROMPT_TEMPLATE = """Human: You are an expert medical scribe.
Summarize the following doctor-patient transcript into a structured SOAP note.
Use only facts stated in the transcript. If a section has no supporting
information, write "Not documented in transcript." for that section.

Transcript:
{transcript}

Output Instructions:
Return ONLY a valid JSON object. Do not add markdown formatting.
The JSON must use exactly these keys: "Subjective", "Objective", "Assessment", "Plan".
Each value is a string; put each finding on its own line.

Assistant:"""


def build_soap_prompt(transcript: str) -> str:
    return SOAP_PROMPT_TEMPLATE.format(transcript=transcript)
