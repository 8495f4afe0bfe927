"""Form synchronization engine for workshop drafts.

The agenda decides which speakers and activities a workshop has. Every agenda
edit re-derives both collections, keeping whatever detail the user typed into
the speaker and activity panels directly. Edits to speaker designations or
takeaways are never pushed back into the agenda.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Iterable, List, Optional, Type

from pydantic import BaseModel

from lib.workshop import (
    FALLBACK_CATEGORY,
    AgendaItem,
    BudgetItem,
    Frequency,
    Speaker,
    WorkshopCategory,
    WorkshopDraft,
    WorkshopRecord,
)
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

CREATE_NEW = "CREATE_NEW"
EXCLUDED_SPEAKER_NAMES = {"panel", "none"}

SCALAR_FIELDS = ("title", "theme", "category", "lead", "date", "venue", "frequency")
NESTED_PARENTS = ("metrics", "budget", "feedback")
STRING_LIST_FIELDS = ("action_plan", "activities", "qualitative_comments")

_id_lock = threading.Lock()
_last_id = 0


def new_record_id() -> str:
    """Millisecond timestamp id, bumped when two ids land in the same millisecond."""
    global _last_id
    with _id_lock:
        candidate = time.time_ns() // 1_000_000
        _last_id = max(candidate, _last_id + 1)
        return str(_last_id)


def _field_name(model: Type[BaseModel], key: str) -> str:
    """Resolve an attribute name or its camelCase alias to the attribute name."""
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    raise ValidationError(f"Unknown {model.__name__} field: {key}")


def _check_index(index: int, length: int, *, allow_append: bool = False) -> None:
    """Reject indices outside the list; ``length`` itself is allowed when appending."""
    upper = length if allow_append else length - 1
    if not 0 <= index <= upper:
        raise ValidationError(f"Row index {index} is out of range for {length} rows.")


def _merged(model: BaseModel, updates: dict[str, Any]) -> BaseModel:
    data = model.model_dump()
    for key, value in updates.items():
        data[_field_name(type(model), key)] = value
    return type(model).model_validate(data)


def derive_speaker_names(agenda: Iterable[AgendaItem]) -> List[str]:
    names: List[str] = []
    for item in agenda:
        name = item.speaker_name.strip()
        if not name or name.lower() in EXCLUDED_SPEAKER_NAMES:
            continue
        if name not in names:
            names.append(name)
    return names


def derive_speakers(agenda: Iterable[AgendaItem], current: List[Speaker]) -> List[Speaker]:
    """
    Speakers implied by the agenda, followed by manually catalogued ones.

    Agenda speakers that already exist keep their designation and takeaways.
    Speakers no agenda row mentions survive only if they carry a designation
    or takeaways.
    """
    names = derive_speaker_names(agenda)
    by_name = {speaker.name: speaker for speaker in current}
    derived = [by_name[name] if name in by_name else Speaker(name=name) for name in names]
    manual = [
        speaker
        for speaker in current
        if speaker.name not in names and (speaker.designation or speaker.takeaways)
    ]
    return derived + manual


def derive_activities(agenda: Iterable[AgendaItem], current: List[str]) -> List[str]:
    activities: List[str] = []
    for item in agenda:
        particulars = item.particulars.strip()
        if item.is_activity and particulars and particulars not in activities:
            activities.append(particulars)
    manual = [activity for activity in current if activity not in activities]
    return activities + manual


class FormSyncEngine:
    """Owns one mutable draft for a create or edit session."""

    def __init__(self, draft: Optional[WorkshopDraft] = None, record_id: Optional[str] = None):
        self.draft = draft if draft is not None else WorkshopDraft.blank()
        self.record_id = record_id
        self.is_custom_category = False
        self.custom_category = ""
        self.recompute_derived()

    @classmethod
    def for_record(cls, record: WorkshopRecord) -> "FormSyncEngine":
        """Start an edit session hydrated from an existing record."""
        engine = cls(record.to_draft(), record_id=record.id)
        if not WorkshopCategory.has_value(record.category):
            engine.is_custom_category = True
            engine.custom_category = record.category
        return engine

    # Scalars

    def set_field(self, name: str, value: Any) -> None:
        if name == "category":
            self.set_category(value)
            return
        if name not in SCALAR_FIELDS:
            raise ValidationError(f"'{name}' is not a scalar workshop field.")
        if name == "frequency":
            try:
                value = Frequency(value)
            except ValueError as exc:
                raise ValidationError(f"Unknown frequency: {value}") from exc
        else:
            value = "" if value is None else str(value)
        setattr(self.draft, name, value)

    def set_category(self, value: str) -> None:
        if value == CREATE_NEW:
            self.is_custom_category = True
            self.draft.category = ""
        else:
            self.is_custom_category = False
            self.draft.category = "" if value is None else str(value)

    def set_custom_category(self, text: str) -> None:
        text = "" if text is None else str(text)
        self.custom_category = text
        self.draft.category = text

    def set_nested_field(self, parent: str, field: str, value: Any) -> None:
        if parent not in NESTED_PARENTS:
            raise ValidationError(f"'{parent}' is not a nested workshop field.")
        setattr(self.draft, parent, _merged(getattr(self.draft, parent), {field: value}))

    # Agenda

    def upsert_agenda_item(self, index: int, **partial: Any) -> None:
        agenda = list(self.draft.agenda)
        _check_index(index, len(agenda), allow_append=True)
        if index == len(agenda):
            agenda.append(_merged(AgendaItem(), partial))
        else:
            agenda[index] = _merged(agenda[index], partial)
        self.draft.agenda = agenda
        self.recompute_derived()

    def move_agenda_item(self, index: int, direction: str) -> bool:
        """Swap the item with its neighbour; False when already at the boundary."""
        if direction not in ("up", "down"):
            raise ValidationError(f"Unknown direction: {direction}")
        target = index - 1 if direction == "up" else index + 1
        agenda = list(self.draft.agenda)
        if not 0 <= index < len(agenda) or not 0 <= target < len(agenda):
            return False
        agenda[index], agenda[target] = agenda[target], agenda[index]
        self.draft.agenda = agenda
        self.recompute_derived()
        return True

    def append_agenda_item(self, item: Optional[AgendaItem] = None) -> None:
        self.draft.agenda = [*self.draft.agenda, item or AgendaItem()]
        self.recompute_derived()

    def remove_agenda_item(self, index: int) -> bool:
        # The form always shows at least one agenda row.
        if len(self.draft.agenda) <= 1:
            return False
        agenda = list(self.draft.agenda)
        _check_index(index, len(agenda))
        del agenda[index]
        self.draft.agenda = agenda
        self.recompute_derived()
        return True

    # Speakers

    def _check_unique_speaker(self, name: str, skip: Optional[int] = None) -> None:
        name = name.strip()
        for position, speaker in enumerate(self.draft.speakers):
            if name and position != skip and speaker.name.strip() == name:
                raise ValidationError(f"Speaker '{name}' is already on the roster.")

    def upsert_speaker(self, index: int, field: str, value: str) -> None:
        speakers = list(self.draft.speakers)
        _check_index(index, len(speakers), allow_append=True)
        if _field_name(Speaker, field) == "name":
            self._check_unique_speaker("" if value is None else str(value), skip=index)
        if index == len(speakers):
            speakers.append(_merged(Speaker(), {field: value}))
        else:
            speakers[index] = _merged(speakers[index], {field: value})
        self.draft.speakers = speakers

    def append_speaker(self, speaker: Optional[Speaker] = None) -> None:
        if speaker is not None:
            self._check_unique_speaker(speaker.name)
        self.draft.speakers = [*self.draft.speakers, speaker or Speaker()]

    def remove_speaker(self, index: int) -> bool:
        if not self.draft.speakers:
            return False
        speakers = list(self.draft.speakers)
        _check_index(index, len(speakers))
        del speakers[index]
        self.draft.speakers = speakers
        return True

    # Budget expenses

    def upsert_expense(self, index: int, field: str, value: Any) -> None:
        expenses = list(self.draft.budget.expenses)
        _check_index(index, len(expenses), allow_append=True)
        if index == len(expenses):
            expenses.append(_merged(BudgetItem(), {field: value}))
        else:
            expenses[index] = _merged(expenses[index], {field: value})
        self.draft.budget = self.draft.budget.model_copy(update={"expenses": expenses})

    def append_expense(self, item: Optional[BudgetItem] = None) -> None:
        expenses = [*self.draft.budget.expenses, item or BudgetItem()]
        self.draft.budget = self.draft.budget.model_copy(update={"expenses": expenses})

    def remove_expense(self, index: int) -> bool:
        if not self.draft.budget.expenses:
            return False
        expenses = list(self.draft.budget.expenses)
        _check_index(index, len(expenses))
        del expenses[index]
        self.draft.budget = self.draft.budget.model_copy(update={"expenses": expenses})
        return True

    @property
    def total_incurred(self) -> float:
        return self.draft.budget.total_incurred

    # String lists: action plan, activities, feedback comments

    def _get_list(self, field: str) -> List[str]:
        if field not in STRING_LIST_FIELDS:
            raise ValidationError(f"'{field}' is not a list of strings.")
        if field == "qualitative_comments":
            return list(self.draft.feedback.qualitative_comments)
        return list(getattr(self.draft, field))

    def _set_list(self, field: str, values: List[str]) -> None:
        if field == "qualitative_comments":
            self.draft.feedback = self.draft.feedback.model_copy(update={"qualitative_comments": values})
        else:
            setattr(self.draft, field, values)

    def set_list_item(self, field: str, index: int, value: str) -> None:
        values = self._get_list(field)
        _check_index(index, len(values))
        values[index] = value
        self._set_list(field, values)

    def append_list_item(self, field: str, value: str = "") -> None:
        self._set_list(field, [*self._get_list(field), value])

    def remove_list_item(self, field: str, index: int) -> bool:
        values = self._get_list(field)
        if not values:
            return False
        _check_index(index, len(values))
        del values[index]
        self._set_list(field, values)
        return True

    # Attachments

    def attach(self, url: str, name: str) -> None:
        self.draft.attachment_url = url
        self.draft.attachment_name = name

    def clear_attachment(self) -> None:
        self.draft.attachment_url = None
        self.draft.attachment_name = None

    # Derivation

    def recompute_derived(self) -> bool:
        """
        Re-derive speakers and activities from the agenda.

        Each collection is only replaced when the derived value differs from
        the current one, so an unchanged list keeps its identity.

        Returns:
            True if either collection was replaced.
        """
        changed = False
        speakers = derive_speakers(self.draft.agenda, self.draft.speakers)
        if speakers != self.draft.speakers:
            self.draft.speakers = speakers
            changed = True
        activities = derive_activities(self.draft.agenda, self.draft.activities)
        if activities != self.draft.activities:
            self.draft.activities = activities
            changed = True
        return changed

    # Submit

    def finalize(self, record_id: Optional[str] = None) -> WorkshopRecord:
        """
        Freeze the draft into an immutable record.

        Args:
            record_id: Id supplied by the edit route. Falls back to the id of
                the record this session was hydrated from, then to a new id.

        Returns:
            The finalized record.
        """
        if self.is_custom_category:
            category = self.custom_category.strip()
        else:
            category = self.draft.category
        data = self.draft.model_dump()
        data["category"] = category or FALLBACK_CATEGORY
        data["id"] = record_id or self.record_id or new_record_id()
        record = WorkshopRecord.model_validate(data)
        logger.debug("Finalized workshop draft as record %s", record.id)
        return record
