import asyncio
import json
import logging
import re
from typing import Any, Dict

from google.genai import types

from ..errors import ParseError
from ..models import StructuredResume, coerce_structured_resume
from .resume_prompt import SYSTEM_PROMPT, build_prompt

logger = logging.getLogger(__name__)


def clean_gemini_output(text: str) -> str:
    """Removes markdown-style ```json and ``` from Gemini output."""
    text = re.sub(r"^```(?:json)?\s*", "", text.strip())
    text = re.sub(r"\s*```$", "", text.strip())
    return text.strip()


def decode_model_json(text: str) -> Dict[str, Any]:
    cleaned = clean_gemini_output(text or "")
    if not cleaned:
        raise ParseError("Failed to parse resume with AI: empty response")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse resume with AI: invalid JSON ({e.msg})") from e
    if not isinstance(payload, dict):
        raise ParseError("Failed to parse resume with AI: expected a JSON object")
    return payload


class StructuredDataRequester:
    """Asks Gemini for the structured record behind a resume's raw text.

    One request per call and no retries: any failure of the model call, or a
    reply that is not a JSON object, surfaces as ``ParseError``.
    """

    def __init__(self, client, model: str):
        self.client = client
        self.model = model

    def _generate(self, raw_text: str) -> str:
        response = self.client.models.generate_content(
            model=self.model,
            contents=build_prompt(raw_text),
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_PROMPT,
                response_mime_type="application/json",
            ),
        )
        return response.text or ""

    async def request(self, raw_text: str) -> StructuredResume:
        if self.client is None:
            raise ParseError("Failed to parse resume with AI: Gemini is not configured")
        try:
            text = await asyncio.to_thread(self._generate, raw_text or "")
        except Exception as e:
            logger.exception("Gemini request failed")
            raise ParseError(f"Failed to parse resume with AI: {e}") from e

        payload = decode_model_json(text)
        record = coerce_structured_resume(payload)
        logger.info(
            "Gemini returned %d skill(s), %d position(s), %d education entr(ies)",
            len(record.skills),
            len(record.work_experience),
            len(record.education),
        )
        return record
