"""Tests for the archive CLI."""

import json

from apps.workshop_cli.main import _main
from lib.record_store import RecordStore


def _store(remote) -> RecordStore:
    return RecordStore(remote, fallback_mode="empty", seed_on_empty=False)


def test_list_filters_by_search(remote, capsys) -> None:
    assert _main(["list", "--search", "older"], store=_store(remote)) == 0
    output = capsys.readouterr().out
    assert "1 Active Records" in output
    assert "[100] 10-01-2023" in output


def test_show_prints_record_json(remote, capsys) -> None:
    assert _main(["show", "200"], store=_store(remote)) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["id"] == "200"
    assert payload["budgetTotal"] == 0


def test_show_unknown_record_fails(remote, capsys) -> None:
    assert _main(["show", "404"], store=_store(remote)) == 1
    assert "not found" in capsys.readouterr().out


def test_dashboard_warns_in_fallback_mode(remote, capsys) -> None:
    remote.fail_on.add("select")
    assert _main(["dashboard", "--year", "2024"], store=_store(remote)) == 0
    output = capsys.readouterr().out
    assert "offline fallback mode" in output
    assert "Workshops: 0" in output
