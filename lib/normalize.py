"""Shape repair between remote workshop rows and in-memory records.

Remote rows arrive in several historical shapes: the action plan column was
created as ``actionPlan``, ``actionplan`` or ``action_plan``; early agenda rows
stored ``speakerName`` instead of ``speaker``; nested documents can be null,
JSON-encoded strings or missing altogether. ``ensure_defaults`` is the single
migration point; ``to_remote_row`` is its inverse for writes.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

from lib import config
from lib.validation import coerce_count, coerce_number
from lib.workshop import DEFAULT_CATEGORY, Frequency, WorkshopRecord

SCALAR_FIELDS = ("title", "theme", "category", "lead", "date", "venue")
OPTIONAL_FIELDS = ("attachmentUrl", "attachmentName")


def _normalize_key(key: str) -> str:
    return re.sub(r"[^0-9a-z]+", "", key.lower())


def _dict_value(data: Dict[str, Any], key: str) -> Any:
    if key in data:
        return data[key]

    normalized_target = _normalize_key(key)
    for candidate_key, candidate_value in data.items():
        if isinstance(candidate_key, str) and _normalize_key(candidate_key) == normalized_target:
            return candidate_value
    return None


def _decode(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _as_list(value: Any) -> List[Any]:
    value = _decode(value)
    return list(value) if isinstance(value, list) else []


def _as_dict(value: Any) -> Dict[str, Any]:
    value = _decode(value)
    return dict(value) if isinstance(value, dict) else {}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y"}
    return bool(value)


def _texts(value: Any) -> List[str]:
    return [_as_text(item) for item in _as_list(value) if item is not None and not isinstance(item, (dict, list))]


def _repair_agenda(value: Any) -> List[Dict[str, Any]]:
    items = []
    for raw in _as_list(value):
        if not isinstance(raw, dict):
            continue
        speaker = _dict_value(raw, "speaker")
        if speaker is None:
            speaker = _dict_value(raw, "speakerName")
        items.append(
            {
                "particulars": _as_text(_dict_value(raw, "particulars")),
                "startTime": _as_text(_dict_value(raw, "startTime")),
                "endTime": _as_text(_dict_value(raw, "endTime")),
                "speaker": _as_text(speaker),
                "remarks": _as_text(_dict_value(raw, "remarks")),
                "isActivity": _as_bool(_dict_value(raw, "isActivity")),
            }
        )
    return items


def _repair_speakers(value: Any) -> List[Dict[str, str]]:
    speakers = []
    for raw in _as_list(value):
        if isinstance(raw, str):
            raw = {"name": raw}
        if not isinstance(raw, dict):
            continue
        speakers.append(
            {
                "name": _as_text(_dict_value(raw, "name")),
                "designation": _as_text(_dict_value(raw, "designation")),
                "takeaways": _as_text(_dict_value(raw, "takeaways")),
            }
        )
    return speakers


def _repair_budget(value: Any) -> Dict[str, Any]:
    budget = _as_dict(value)
    expenses = []
    for raw in _as_list(_dict_value(budget, "expenses")):
        if not isinstance(raw, dict):
            continue
        expenses.append(
            {
                "description": _as_text(_dict_value(raw, "description")),
                "amount": coerce_number(_dict_value(raw, "amount")),
            }
        )
    return {"allocated": max(0.0, coerce_number(_dict_value(budget, "allocated"))), "expenses": expenses}


def _repair_frequency(value: Any) -> str:
    text = _as_text(value).strip()
    for member in Frequency:
        if text.lower() == member.value.lower():
            return member.value
    return Frequency.ONE_TIME.value


def _migrate(row: Dict[str, Any]) -> Dict[str, Any]:
    """Bring a row of any historical shape up to the current document shape."""
    metrics = _as_dict(_dict_value(row, "metrics"))
    feedback = _as_dict(_dict_value(row, "feedback"))
    migrated: Dict[str, Any] = {"id": _as_text(_dict_value(row, "id"))}
    for field in SCALAR_FIELDS:
        migrated[field] = _as_text(_dict_value(row, field))
    migrated["category"] = migrated["category"] or DEFAULT_CATEGORY
    migrated["frequency"] = _repair_frequency(_dict_value(row, "frequency"))
    migrated["agenda"] = _repair_agenda(_dict_value(row, "agenda"))
    migrated["speakers"] = _repair_speakers(_dict_value(row, "speakers"))
    migrated["activities"] = _texts(_dict_value(row, "activities"))
    migrated["metrics"] = {
        "participantCount": coerce_count(_dict_value(metrics, "participantCount")),
        "demographic": _as_text(_dict_value(metrics, "demographic")),
    }
    migrated["feedback"] = {
        "averageRating": _dict_value(feedback, "averageRating"),
        "qualitativeComments": _texts(_dict_value(feedback, "qualitativeComments")),
    }
    migrated["budget"] = _repair_budget(_dict_value(row, "budget"))
    migrated["actionPlan"] = _texts(_dict_value(row, "actionPlan"))
    for field in OPTIONAL_FIELDS:
        value = _dict_value(row, field)
        migrated[field] = _as_text(value) if value else None
    return migrated


def repair_partial(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Repair the fields present in a partial workshop, such as a model reply.

    Null values are dropped so callers can apply their own defaults; nested
    documents that are present get the same repair as remote rows.
    """
    repaired = {key: value for key, value in data.items() if value is not None}
    action_plan = _dict_value(repaired, "actionPlan")
    for key in [key for key in repaired if isinstance(key, str) and _normalize_key(key) == "actionplan"]:
        del repaired[key]
    if action_plan is not None:
        repaired["actionPlan"] = _texts(action_plan)
    for field in SCALAR_FIELDS + ("frequency",):
        if field in repaired:
            repaired[field] = _as_text(repaired[field])
    if "agenda" in repaired:
        repaired["agenda"] = _repair_agenda(repaired["agenda"])
    if "speakers" in repaired:
        repaired["speakers"] = _repair_speakers(repaired["speakers"])
    if "activities" in repaired:
        repaired["activities"] = _texts(repaired["activities"])
    if "metrics" in repaired:
        metrics = _as_dict(repaired["metrics"])
        repaired["metrics"] = {
            "participantCount": coerce_count(_dict_value(metrics, "participantCount")),
            "demographic": _as_text(_dict_value(metrics, "demographic")),
        }
    if "feedback" in repaired:
        feedback = _as_dict(repaired["feedback"])
        repaired["feedback"] = {
            "averageRating": _dict_value(feedback, "averageRating"),
            "qualitativeComments": _texts(_dict_value(feedback, "qualitativeComments")),
        }
    if "budget" in repaired:
        repaired["budget"] = _repair_budget(repaired["budget"])
    return repaired


def ensure_defaults(row: Dict[str, Any]) -> WorkshopRecord:
    """
    Repair a remote row into a fully shaped ``WorkshopRecord``.

    Missing or malformed nested documents become empty containers or zeroed
    structures. Repairs are silent; nothing here raises for bad data.

    Args:
        row: Raw row as returned by the ``workshops`` table.

    Returns:
        The repaired record.
    """
    return WorkshopRecord.model_validate(_migrate(row))


def to_remote_row(
    record: WorkshopRecord,
    action_plan_column: Optional[str] = None,
    *,
    clear_absent: bool = False,
) -> Dict[str, Any]:
    """
    Serialize a record for the remote table.

    Args:
        record: Finalized record.
        action_plan_column: Remote column name for the action plan. Defaults
            to ``WORKSHOPS_ACTION_PLAN_COLUMN``.
        clear_absent: Send absent attachment fields as explicit nulls. Updates
            only touch the columns they name, so a cleared attachment must be
            written as null to reach the remote row.

    Returns:
        Row dictionary ready for insert, update or upsert.
    """
    column = action_plan_column or config.WORKSHOPS_ACTION_PLAN_COLUMN
    row = record.to_payload()
    action_plan = row.pop("actionPlan", [])
    row[column] = action_plan
    if not clear_absent:
        for field in OPTIONAL_FIELDS:
            if row.get(field) is None:
                row.pop(field, None)
    return row
