"""Workshop record models shared by the form engine, the store and the API.

Python attributes are snake_case; the remote table and the JSON API keep the
camelCase keys of the archive (``startTime``, ``isActivity``, ``actionPlan``),
exposed through field aliases.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lib.validation import coerce_count, coerce_number


class WorkshopCategory(str, Enum):
    SECURITY_EXCELLENCE = "Security Excellence"
    AI_LITERACY = "AI Literacy"
    SPIRITUAL_CURRICULUM = "Spiritual Curriculum"
    TEACHER_TRAINING = "Teacher Training"
    LEADERSHIP_DEVELOPMENT = "Leadership Development"
    ADMINISTRATIVE_EXCELLENCE = "Administrative Excellence"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in {member.value for member in cls}


class Frequency(str, Enum):
    ANNUAL = "Annual"
    BI_ANNUAL = "Bi-Annual"
    ONE_TIME = "One-time"


DEFAULT_CATEGORY = WorkshopCategory.TEACHER_TRAINING.value
FALLBACK_CATEGORY = "Uncategorized"


class _ArchiveModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump using the archive's camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class AgendaItem(_ArchiveModel):
    particulars: str = ""
    start_time: str = Field("", alias="startTime")
    end_time: str = Field("", alias="endTime")
    speaker_name: str = Field("", alias="speaker")
    remarks: str = ""
    is_activity: bool = Field(False, alias="isActivity")


class Speaker(_ArchiveModel):
    name: str = ""
    designation: str = ""
    takeaways: str = ""


class WorkshopMetrics(_ArchiveModel):
    participant_count: int = Field(0, alias="participantCount")
    demographic: str = ""

    @field_validator("participant_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return coerce_count(value)


class FeedbackSummary(_ArchiveModel):
    average_rating: float = Field(0.0, alias="averageRating")
    qualitative_comments: List[str] = Field(default_factory=list, alias="qualitativeComments")

    @field_validator("average_rating", mode="before")
    @classmethod
    def _clamp_rating(cls, value: Any) -> float:
        return min(5.0, max(0.0, coerce_number(value)))


class BudgetItem(_ArchiveModel):
    description: str = ""
    amount: float = 0.0

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        return coerce_number(value)


class WorkshopBudget(_ArchiveModel):
    allocated: float = 0.0
    expenses: List[BudgetItem] = Field(default_factory=list)

    @field_validator("allocated", mode="before")
    @classmethod
    def _coerce_allocated(cls, value: Any) -> float:
        return max(0.0, coerce_number(value))

    @property
    def total_incurred(self) -> float:
        return sum(coerce_number(item.amount) for item in self.expenses)


class WorkshopDraft(_ArchiveModel):
    """An in-progress workshop record; everything except the id."""

    title: str = ""
    theme: str = ""
    category: str = DEFAULT_CATEGORY
    lead: str = ""
    date: str = Field(default_factory=lambda: date.today().isoformat())
    venue: str = ""
    frequency: Frequency = Frequency.ANNUAL
    agenda: List[AgendaItem] = Field(default_factory=list)
    speakers: List[Speaker] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)
    metrics: WorkshopMetrics = Field(default_factory=WorkshopMetrics)
    feedback: FeedbackSummary = Field(default_factory=FeedbackSummary)
    budget: WorkshopBudget = Field(default_factory=WorkshopBudget)
    action_plan: List[str] = Field(default_factory=list, alias="actionPlan")
    attachment_url: Optional[str] = Field(None, alias="attachmentUrl")
    attachment_name: Optional[str] = Field(None, alias="attachmentName")

    @classmethod
    def blank(cls) -> "WorkshopDraft":
        """The shape a fresh create form starts from."""
        return cls(
            agenda=[AgendaItem()],
            feedback=FeedbackSummary(average_rating=5, qualitative_comments=[""]),
            budget=WorkshopBudget(allocated=0, expenses=[BudgetItem()]),
            action_plan=[""],
        )


class WorkshopRecord(WorkshopDraft):
    """A finalized, immutable workshop record."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str

    def to_draft(self) -> WorkshopDraft:
        """Deep copy of everything but the id, ready for editing."""
        data = self.model_dump(exclude={"id"})
        return WorkshopDraft.model_validate(data)


def budget_total(workshop: WorkshopDraft) -> float:
    """Sum of expense amounts; never stored, always recomputed."""
    return workshop.budget.total_incurred
