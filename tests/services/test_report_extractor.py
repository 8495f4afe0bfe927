"""Tests for the report extraction service with a scripted model."""

from datetime import date

import pytest

from services.report_extractor.chain import EXTRACTION_FAILED, extract_json_from_text
from services.report_extractor.run import run
from utils.errors import ExtractionError, ValidationError


def _reply(text: str):
    prompts: list = []

    def llm(prompt: str) -> str:
        prompts.append(prompt)
        return text

    llm.prompts = prompts
    return llm


def test_extract_json_from_fenced_block() -> None:
    assert extract_json_from_text('Here you go:\n```json\n{"title": "X"}\n```') == {"title": "X"}
    assert extract_json_from_text('noise {"title": "Y"} trailing') == {"title": "Y"}
    assert extract_json_from_text("no json here") is None


def test_run_fills_defaults_for_missing_fields() -> None:
    llm = _reply('{"title": "AI Bootcamp", "metrics": {"participantCount": "40"}}')
    record = run("  Notes from the AI bootcamp held last week.  ", llm=llm)
    assert record.title == "AI Bootcamp"
    assert record.theme == "No theme provided"
    assert record.category == "Teacher Training"
    assert record.lead == "Unknown Organizer"
    assert record.venue == "Virtual"
    assert record.frequency.value == "One-time"
    assert record.date == date.today().isoformat()
    assert record.metrics.participant_count == 40
    assert record.id
    assert "Notes from the AI bootcamp held last week." in llm.prompts[0]


def test_run_uses_na_demographic_when_metrics_missing() -> None:
    record = run("Short report", llm=_reply('{"frequency": "Annual"}'))
    assert record.metrics.demographic == "N/A"
    assert record.frequency.value == "Annual"
    assert record.title == "Untitled Workshop"


def test_non_json_reply_is_an_extraction_error() -> None:
    with pytest.raises(ExtractionError) as excinfo:
        run("Report", llm=_reply("Sorry, I cannot help with that."))
    assert str(excinfo.value) == EXTRACTION_FAILED


def test_model_failure_is_an_extraction_error() -> None:
    def broken(prompt: str) -> str:
        raise RuntimeError("quota exceeded")

    with pytest.raises(ExtractionError):
        run("Report", llm=broken)


def test_empty_report_is_rejected_before_calling_model() -> None:
    llm = _reply("{}")
    with pytest.raises(ValidationError):
        run("   ", llm=llm)
    assert llm.prompts == []


def test_null_values_in_reply_are_defaulted() -> None:
    llm = _reply(
        '{"title": "T", "lead": null, "agenda": [{"particulars": "Intro", "startTime": null, "endTime": null,'
        ' "speaker": null, "remarks": null, "isActivity": false}], "metrics": {"participantCount": null,'
        ' "demographic": null}, "budget": {"allocated": null, "expenses": [{"description": null, "amount": null}]}}'
    )
    record = run("Report with gaps", llm=llm)
    assert record.title == "T"
    assert record.lead == "Unknown Organizer"
    assert record.agenda[0].particulars == "Intro"
    assert record.agenda[0].speaker_name == ""
    assert record.metrics.participant_count == 0
    assert record.budget.expenses[0].amount == 0
