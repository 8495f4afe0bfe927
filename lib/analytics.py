"""Read-only views over the archive: dashboard, inventory and comparison."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, TypedDict

from lib.workshop import WorkshopDraft, WorkshopRecord

FIRST_LISTED_YEAR = 2020
LAST_LISTED_YEAR = 2030
ALL_CATEGORIES = "All"


class DashboardSummary(TypedDict):
    year: str
    record_count: int
    total_participants: int
    average_rating: str
    records: List[WorkshopRecord]


class ComparisonRow(TypedDict):
    id: str
    title: str
    lead: str
    category: str
    date: str
    reach: int
    score: float
    score_band: str


def _parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


def record_year(record: WorkshopDraft) -> Optional[str]:
    parsed = _parse_date(record.date)
    return str(parsed.year) if parsed else None


def format_date(value: str) -> str:
    """ISO date to dd-mm-yyyy; "N/A" when empty or unparseable."""
    parsed = _parse_date(value) if value else None
    if parsed is None:
        return "N/A"
    return parsed.strftime("%d-%m-%Y")


def budget_total(record: WorkshopDraft) -> float:
    return record.budget.total_incurred


def budget_utilization(record: WorkshopDraft) -> float:
    """Share of the allocation spent, as a percentage rounded to one decimal."""
    allocated = record.budget.allocated
    if allocated <= 0:
        return 0.0
    return round(budget_total(record) / allocated * 100, 1)


def available_years(records: Iterable[WorkshopRecord]) -> List[str]:
    years = {str(year) for year in range(FIRST_LISTED_YEAR, LAST_LISTED_YEAR + 1)}
    years.update(year for year in (record_year(record) for record in records) if year)
    return sorted(years, reverse=True)


def filter_by_year(records: Iterable[WorkshopRecord], year: str) -> List[WorkshopRecord]:
    return [record for record in records if record_year(record) == str(year)]


def dashboard_summary(records: Iterable[WorkshopRecord], year: Optional[str] = None) -> DashboardSummary:
    selected_year = str(year or date.today().year)
    selected = filter_by_year(records, selected_year)
    total_participants = sum(record.metrics.participant_count for record in selected)
    if selected:
        average = sum(record.feedback.average_rating for record in selected) / len(selected)
        average_rating = f"{average:.1f}"
    else:
        average_rating = "0.0"
    return {
        "year": selected_year,
        "record_count": len(selected),
        "total_participants": total_participants,
        "average_rating": average_rating,
        "records": selected,
    }


def inventory_categories(records: Iterable[WorkshopRecord]) -> List[str]:
    categories = [ALL_CATEGORIES]
    for record in records:
        if record.category not in categories:
            categories.append(record.category)
    return categories


def filter_inventory(
    records: Iterable[WorkshopRecord],
    category: str = ALL_CATEGORIES,
    search: str = "",
) -> List[WorkshopRecord]:
    """Category match plus case-insensitive search over title, venue and lead."""
    needle = search.lower()
    matches = []
    for record in records:
        if category != ALL_CATEGORIES and record.category != category:
            continue
        haystacks = (record.title.lower(), record.venue.lower(), record.lead.lower())
        if any(needle in haystack for haystack in haystacks):
            matches.append(record)
    return matches


def score_band(rating: float) -> str:
    if rating >= 4.5:
        return "high"
    if rating >= 4.0:
        return "good"
    return "standard"


def comparison_matrix(records: Iterable[WorkshopRecord]) -> Dict[str, Any]:
    records = list(records)
    rows: List[ComparisonRow] = [
        {
            "id": record.id,
            "title": record.title,
            "lead": record.lead,
            "category": record.category,
            "date": format_date(record.date),
            "reach": record.metrics.participant_count,
            "score": record.feedback.average_rating,
            "score_band": score_band(record.feedback.average_rating),
        }
        for record in records
    ]
    strategic_goals = [record.action_plan[0] for record in records if record.action_plan]
    top_rated = max(records, key=lambda record: record.feedback.average_rating, default=None)
    return {
        "rows": rows,
        "strategic_goals": strategic_goals,
        "top_rated": top_rated.id if top_rated else None,
    }
