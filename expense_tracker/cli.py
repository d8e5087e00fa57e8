"""Console interface for the expense tracker API."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from common.config import api_url_from_env
from desktop.app.api_client import ApiError, ExpenseClient
from desktop.app.state import CATEGORY_OPTIONS, format_amount, sanitize_amount_input


def _parse_amount(value: str) -> str:
    cleaned = sanitize_amount_input(value)
    if not cleaned:
        raise argparse.ArgumentTypeError("Amount must be a numeric value")
    return cleaned


def _format_expense(expense: Dict[str, Any]) -> str:
    return (
        f"[{expense['id']}] {expense['description']} - ${format_amount(expense['amount'])}"
        f" ({expense['category']})"
    )


def handle_command(args: argparse.Namespace, client: ExpenseClient) -> None:
    if args.command == "list":
        expenses = client.list_expenses()
        if not expenses:
            print("No expenses found.")
            return
        print(f"Found {len(expenses)} expenses:")
        for expense in expenses:
            print(_format_expense(expense))
    elif args.command == "show":
        print(_format_expense(client.get_expense(args.id)))
    elif args.command == "add":
        payload = {
            "description": args.description,
            "amount": args.amount,
            "category": args.category,
        }
        expense = client.create_expense(payload)
        print("Expense added:\n" + _format_expense(expense))
    elif args.command == "edit":
        payload = {
            "description": args.description,
            "amount": args.amount,
            "category": args.category,
        }
        expense = client.update_expense(args.id, payload)
        print("Expense updated:\n" + _format_expense(expense))
    elif args.command == "delete":
        client.delete_expense(args.id)
        print(f"Expense {args.id} deleted.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--api-url",
        default=None,
        help="Base URL of the expense API (default: $EXPENSE_API_URL or http://localhost:3000)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List expenses, most recent first")

    show = subparsers.add_parser("show", help="Show a single expense")
    show.add_argument("id")

    add = subparsers.add_parser("add", help="Add a new expense")
    add.add_argument("description")
    add.add_argument("amount", type=_parse_amount)
    add.add_argument("--category", default=CATEGORY_OPTIONS[0], choices=CATEGORY_OPTIONS)

    # Edit replaces every mutable field, so all three are required.
    edit = subparsers.add_parser("edit", help="Replace an existing expense")
    edit.add_argument("id")
    edit.add_argument("description")
    edit.add_argument("amount", type=_parse_amount)
    edit.add_argument("category", choices=CATEGORY_OPTIONS)

    delete = subparsers.add_parser("delete", help="Delete an expense")
    delete.add_argument("id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.ERROR)
    client = ExpenseClient(args.api_url or api_url_from_env())

    try:
        handle_command(args, client)
    except ApiError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
