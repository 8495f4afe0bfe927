"""LLM pipeline turning free-text workshop reports into structured data."""
from typing import Any, Callable, List, Optional
import json
import logging
import re

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from lib.normalize import repair_partial
from lib.workshop import AgendaItem, FeedbackSummary, Speaker, WorkshopBudget, WorkshopMetrics
from services.report_extractor.prompt import build_extraction_prompt
from utils.errors import ExtractionError

logger = logging.getLogger(__name__)

EXTRACTION_FAILED = "Could not process the report into structured data."

LLMCall = Callable[[str], str]


class ExtractedWorkshop(BaseModel):
    """Partial workshop as returned by the model; every field may be missing."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    theme: Optional[str] = None
    category: Optional[str] = None
    lead: Optional[str] = None
    date: Optional[str] = None
    venue: Optional[str] = None
    frequency: Optional[str] = None
    agenda: Optional[List[AgendaItem]] = None
    speakers: Optional[List[Speaker]] = None
    activities: Optional[List[str]] = None
    metrics: Optional[WorkshopMetrics] = None
    feedback: Optional[FeedbackSummary] = None
    budget: Optional[WorkshopBudget] = None
    action_plan: Optional[List[str]] = Field(None, alias="actionPlan")


def extract_json_from_text(text: str) -> Any:
    """
    Extract JSON from text response.

    Args:
        text: Text that may contain JSON

    Returns:
        Parsed JSON object or None
    """
    # Try to find JSON in code blocks
    json_pattern = r'```(?:json)?\s*(\{.*\})\s*```'
    matches = re.findall(json_pattern, text, re.DOTALL)

    if matches:
        try:
            return json.loads(matches[0])
        except json.JSONDecodeError:
            pass

    # Try the outermost braces
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            return None

    return None


def _extract_text(message_content: Any) -> str:
    """Normalize Gemini replies that may be lists of parts or strings."""
    if isinstance(message_content, str):
        return message_content.strip()
    if isinstance(message_content, list):
        parts: List[str] = []
        for part in message_content:
            if isinstance(part, dict) and part.get("type") == "text" and part.get("text"):
                parts.append(part["text"])
            elif isinstance(part, str):
                parts.append(part)
        return "\n".join(p.strip() for p in parts if p).strip()
    return str(message_content or "").strip()


def call_gemini(prompt: str) -> str:
    from models.gemini_client import get_gemini_response

    return _extract_text(get_gemini_response(prompt).content)


def extract_workshop(raw_text: str, llm: Optional[LLMCall] = None) -> ExtractedWorkshop:
    """
    Ask the model for a structured workshop and validate its reply.

    Args:
        raw_text: Validated report text
        llm: Prompt-to-text callable. Defaults to Gemini.

    Returns:
        The partial workshop parsed from the reply

    Raises:
        ExtractionError: If the call fails or the reply is not a usable object
    """
    schema = ExtractedWorkshop.model_json_schema(by_alias=True)
    prompt = build_extraction_prompt(raw_text, schema)
    try:
        response = (llm or call_gemini)(prompt)
    except Exception as exc:
        logger.error("Report extraction call failed: %s", exc)
        raise ExtractionError(EXTRACTION_FAILED) from exc

    data = extract_json_from_text(response or "")
    if not isinstance(data, dict):
        logger.error("Report extraction returned no JSON object: %.200s", response)
        raise ExtractionError(EXTRACTION_FAILED)

    try:
        return ExtractedWorkshop.model_validate(repair_partial(data))
    except PydanticValidationError as exc:
        logger.error("Report extraction returned malformed data: %s", exc)
        raise ExtractionError(EXTRACTION_FAILED) from exc
