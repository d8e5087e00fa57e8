from __future__ import annotations

import pytest

from desktop.app.api_client import ApiError
from expense_tracker import cli


class RecordingClient:
    def __init__(self, *_args, **_kwargs):
        self.calls = []

    def list_expenses(self):
        self.calls.append(("list",))
        return [{"id": 2, "description": "Bus", "amount": 2, "category": "Transport"}]

    def get_expense(self, expense_id):
        raise ApiError("Expense not found", status=404, server_message="Expense not found")

    def create_expense(self, payload):
        self.calls.append(("create", payload))
        return {"id": 3, **payload, "amount": float(payload["amount"])}

    def update_expense(self, expense_id, payload):
        self.calls.append(("update", expense_id, payload))
        return {"id": int(expense_id), **payload}

    def delete_expense(self, expense_id):
        self.calls.append(("delete", expense_id))


@pytest.fixture()
def recording(monkeypatch):
    instances = []

    def factory(*args, **kwargs):
        client = RecordingClient(*args, **kwargs)
        instances.append(client)
        return client

    monkeypatch.setattr(cli, "ExpenseClient", factory)
    return instances


def test_list_prints_two_decimal_amounts(recording, capsys):
    assert cli.main(["--api-url", "http://api.local", "list"]) == 0

    out = capsys.readouterr().out
    assert "[2] Bus - $2.00 (Transport)" in out


def test_add_sends_sanitised_amount(recording, capsys):
    assert cli.main(["add", "Coffee", "3.50", "--category", "Food"]) == 0

    assert recording[0].calls == [("create", {"description": "Coffee", "amount": "3.50", "category": "Food"})]
    assert "Coffee - $3.50 (Food)" in capsys.readouterr().out


def test_edit_replaces_all_fields(recording):
    assert cli.main(["edit", "3", "Tea", "2", "Other"]) == 0

    assert recording[0].calls == [("update", "3", {"description": "Tea", "amount": "2", "category": "Other"})]


def test_delete(recording, capsys):
    assert cli.main(["delete", "3"]) == 0
    assert "Expense 3 deleted." in capsys.readouterr().out


def test_api_error_exits_with_status_one(recording, capsys):
    assert cli.main(["show", "9"]) == 1
    assert "Expense not found" in capsys.readouterr().err


def test_unknown_category_is_rejected_by_parser(recording):
    with pytest.raises(SystemExit):
        cli.main(["add", "Coffee", "3", "--category", "Travel"])
