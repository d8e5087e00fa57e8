"""Client-side state for the expense tracker UIs.

The expense list is a read-through cache of the last fetched server state. It
changes only through three transitions (replace on fetch, append on confirmed
create, remove on confirmed delete) and only from the thread that owns the
controller; network calls may run elsewhere but hand their results back to the
owner before touching state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from desktop.app.api_client import ApiError, CONNECTIVITY_MESSAGE, ExpenseClient

logger = logging.getLogger(__name__)

CATEGORY_OPTIONS: Tuple[str, ...] = ("Food", "Transport", "Shopping", "Bills", "Other")
DEFAULT_CATEGORY = CATEGORY_OPTIONS[0]

SUBMIT_LABEL = "Add Expense"
SUBMIT_BUSY_LABEL = "Adding..."

FETCH_FAILED = "Failed to fetch expenses. Please check your backend server."
CREATE_FAILED = "Failed to add expense. Please check your input and try again."
DELETE_FAILED = "Failed to delete expense. Please try again."

Listener = Callable[[], None]


def sanitize_amount_input(raw: Optional[str]) -> str:
    """Keep digits and the first decimal point; drop every other character."""
    if not raw:
        return ""
    kept: List[str] = []
    seen_point = False
    for char in raw:
        if char.isdigit() and char.isascii():
            kept.append(char)
        elif char == "." and not seen_point:
            kept.append(char)
            seen_point = True
    return "".join(kept)


def format_amount(value: Any) -> str:
    """Render an amount with exactly two decimal places."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return str(value)
    return f"{amount:,.2f}"


@dataclass(frozen=True)
class ExpenseRow:
    id: int
    description: str
    amount: Decimal
    category: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ExpenseRow":
        return cls(
            id=int(data["id"]),
            description=str(data["description"]),
            amount=Decimal(str(data["amount"])),
            category=str(data["category"]),
        )

    @property
    def amount_display(self) -> str:
        return format_amount(self.amount)

    def label(self) -> str:
        return f"{self.description} - ${self.amount_display} ({self.category})"


class ExpenseListState:
    """Owned list of expenses mirrored from the server."""

    def __init__(self) -> None:
        self._items: List[ExpenseRow] = []
        self._listeners: List[Listener] = []

    @property
    def items(self) -> Tuple[ExpenseRow, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def replace_all(self, rows: Iterable[ExpenseRow]) -> None:
        self._items = list(rows)
        self._notify()

    def append(self, row: ExpenseRow) -> None:
        self._items.append(row)
        self._notify()

    def remove(self, expense_id: int) -> None:
        self._items = [row for row in self._items if row.id != expense_id]
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()


class FormState:
    def __init__(self) -> None:
        self.description = ""
        self.amount = ""
        self.category = DEFAULT_CATEGORY

    def set_amount(self, raw: str) -> str:
        self.amount = sanitize_amount_input(raw)
        return self.amount

    def reset(self) -> None:
        self.description = ""
        self.amount = ""
        self.category = DEFAULT_CATEGORY

    def to_payload(self) -> Dict[str, str]:
        return {
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
        }


class ExpenseController:
    """Issues requests and reconciles the local list with server responses."""

    def __init__(self, client: ExpenseClient) -> None:
        self.client = client
        self.expenses = ExpenseListState()
        self.form = FormState()
        self.busy = False
        self.error: Optional[str] = None

    @property
    def submit_label(self) -> str:
        return SUBMIT_BUSY_LABEL if self.busy else SUBMIT_LABEL

    # Fetch ---------------------------------------------------------------
    def load(self) -> bool:
        try:
            rows = self.client.list_expenses()
        except ApiError as exc:
            self.fail_load(exc)
            return False
        self.finish_load(rows)
        return True

    def finish_load(self, rows: Iterable[Mapping[str, Any]]) -> None:
        self.error = None
        self.expenses.replace_all(ExpenseRow.from_payload(row) for row in rows)

    def fail_load(self, exc: ApiError) -> None:
        logger.error("Error fetching expenses: %s", exc)
        self.error = CONNECTIVITY_MESSAGE if exc.is_transport_error else FETCH_FAILED
        self.expenses.replace_all([])

    # Create --------------------------------------------------------------
    def begin_submit(self) -> Optional[Dict[str, str]]:
        """Mark a submission in flight; returns None if one already is."""
        if self.busy:
            return None
        self.busy = True
        self.error = None
        return self.form.to_payload()

    def finish_submit(self, created: Mapping[str, Any]) -> ExpenseRow:
        row = ExpenseRow.from_payload(created)
        self.busy = False
        self.expenses.append(row)
        self.form.reset()
        return row

    def fail_submit(self, exc: ApiError) -> None:
        logger.error("Failed to add expense: %s", exc)
        self.busy = False
        if exc.server_message:
            self.error = exc.server_message
        elif exc.is_transport_error:
            self.error = CONNECTIVITY_MESSAGE
        else:
            self.error = CREATE_FAILED

    def submit(self) -> Optional[ExpenseRow]:
        payload = self.begin_submit()
        if payload is None:
            return None
        try:
            created = self.client.create_expense(payload)
        except ApiError as exc:
            self.fail_submit(exc)
            return None
        return self.finish_submit(created)

    # Delete --------------------------------------------------------------
    def finish_delete(self, expense_id: int) -> None:
        self.expenses.remove(expense_id)

    def fail_delete(self, exc: ApiError) -> None:
        logger.error("Failed to delete expense: %s", exc)
        if exc.server_message:
            self.error = exc.server_message
        elif exc.is_transport_error:
            self.error = CONNECTIVITY_MESSAGE
        else:
            self.error = DELETE_FAILED

    def delete(self, expense_id: int) -> bool:
        try:
            self.client.delete_expense(expense_id)
        except ApiError as exc:
            self.fail_delete(exc)
            return False
        self.finish_delete(expense_id)
        return True
