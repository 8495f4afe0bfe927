"""Entry point for the report extraction service."""
from __future__ import annotations

from datetime import date
from typing import Optional

from lib.form_sync import new_record_id
from lib.validation import validate_report_text
from lib.workshop import (
    DEFAULT_CATEGORY,
    FeedbackSummary,
    Frequency,
    WorkshopBudget,
    WorkshopMetrics,
    WorkshopRecord,
)
from services.report_extractor.chain import ExtractedWorkshop, LLMCall, extract_workshop
from utils.decorators import log_execution


def _frequency(value: Optional[str]) -> Frequency:
    try:
        return Frequency(value)
    except ValueError:
        return Frequency.ONE_TIME


def build_record(extracted: ExtractedWorkshop, record_id: Optional[str] = None) -> WorkshopRecord:
    """Default every field the model left out and freeze the result."""
    return WorkshopRecord(
        id=record_id or new_record_id(),
        title=extracted.title or "Untitled Workshop",
        theme=extracted.theme or "No theme provided",
        category=extracted.category or DEFAULT_CATEGORY,
        lead=extracted.lead or "Unknown Organizer",
        date=extracted.date or date.today().isoformat(),
        venue=extracted.venue or "Virtual",
        frequency=_frequency(extracted.frequency),
        agenda=extracted.agenda or [],
        speakers=extracted.speakers or [],
        activities=extracted.activities or [],
        metrics=extracted.metrics or WorkshopMetrics(participant_count=0, demographic="N/A"),
        feedback=extracted.feedback or FeedbackSummary(average_rating=0, qualitative_comments=[]),
        budget=extracted.budget or WorkshopBudget(allocated=0, expenses=[]),
        action_plan=extracted.action_plan or [],
    )


@log_execution
def run(raw_text: str, llm: Optional[LLMCall] = None) -> WorkshopRecord:
    """
    Turn a raw workshop report into a new record.

    Args:
        raw_text: Report text pasted by the user
        llm: Optional prompt-to-text callable overriding Gemini

    Returns:
        A finalized record with a fresh id; nothing is persisted here
    """
    validated_text = validate_report_text(raw_text)
    extracted = extract_workshop(validated_text, llm=llm)
    return build_record(extracted)
