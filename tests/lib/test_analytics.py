"""Tests for dashboard, inventory and comparison views."""

from lib import analytics
from lib.seed import seed_workshops
from lib.workshop import BudgetItem, FeedbackSummary, WorkshopBudget, WorkshopMetrics


def test_format_date_uses_day_month_year() -> None:
    assert analytics.format_date("2024-03-15") == "15-03-2024"
    assert analytics.format_date("") == "N/A"
    assert analytics.format_date("someday") == "N/A"


def test_available_years_include_record_years_outside_range(make_workshop) -> None:
    years = analytics.available_years([make_workshop("1", date="2018-04-01")])
    assert years[0] == "2030"
    assert years[-1] == "2018"
    assert len(years) == len(set(years))


def test_dashboard_summary_for_seed_year() -> None:
    summary = analytics.dashboard_summary(seed_workshops(), "2024")
    assert summary["record_count"] == 2
    assert summary["total_participants"] == 1650
    assert summary["average_rating"] == "4.5"


def test_dashboard_summary_for_empty_year() -> None:
    summary = analytics.dashboard_summary(seed_workshops(), "2021")
    assert summary["record_count"] == 0
    assert summary["average_rating"] == "0.0"


def test_inventory_filters_by_category_and_search() -> None:
    records = seed_workshops()
    assert analytics.inventory_categories(records) == ["All", "Spiritual Curriculum", "AI Literacy"]
    assert [r.id for r in analytics.filter_inventory(records, "All", "zoom")] == ["2"]
    assert [r.id for r in analytics.filter_inventory(records, "All", "anita")] == ["1"]
    assert analytics.filter_inventory(records, "AI Literacy", "delhi") == []


def test_budget_total_and_utilization(make_workshop) -> None:
    record = make_workshop(
        "1",
        budget=WorkshopBudget(allocated=4000, expenses=[BudgetItem(amount=1000), BudgetItem(amount=500)]),
    )
    assert analytics.budget_total(record) == 1500
    assert analytics.budget_utilization(record) == 37.5
    assert analytics.budget_utilization(make_workshop("2")) == 0.0


def test_comparison_matrix_bands_and_goals(make_workshop) -> None:
    records = [
        make_workshop("1", feedback=FeedbackSummary(average_rating=4.8), action_plan=["Goal A", "Goal B"]),
        make_workshop("2", feedback=FeedbackSummary(average_rating=4.1), metrics=WorkshopMetrics(participant_count=30)),
        make_workshop("3", feedback=FeedbackSummary(average_rating=3.0)),
    ]
    matrix = analytics.comparison_matrix(records)
    assert [row["score_band"] for row in matrix["rows"]] == ["high", "good", "standard"]
    assert matrix["rows"][1]["reach"] == 30
    assert matrix["rows"][0]["date"] == "01-06-2024"
    assert matrix["strategic_goals"] == ["Goal A"]
    assert matrix["top_rated"] == "1"


def test_comparison_matrix_of_nothing() -> None:
    assert analytics.comparison_matrix([]) == {"rows": [], "strategic_goals": [], "top_rated": None}
