"""Framework-agnostic business services for the expense tracker."""

from __future__ import annotations

from typing import Dict, List, Mapping

from .exceptions import RecordNotFoundError, ValidationError
from .models import Expense
from .storage import SQLStore
from .validators import (
    CATEGORY_REQUIRED,
    DESCRIPTION_REQUIRED,
    is_storable_id,
    parse_amount,
    parse_expense_id,
    validate_required_str,
)

NOT_FOUND = "Expense not found"


class ExpenseService:
    """Validates expense input and translates it into single store statements.

    The service holds no state between calls; the store is the only shared
    resource, so concurrent requests never coordinate here.
    """

    def __init__(self, store: SQLStore) -> None:
        self._store = store

    # Public API -----------------------------------------------------------
    def list(self) -> List[Expense]:
        return [Expense.from_dict(row) for row in self._store.select_all()]

    def get(self, raw_id: object) -> Expense:
        """Return an expense or raise if it does not exist."""
        expense_id = parse_expense_id(raw_id)
        row = self._store.select_one(expense_id) if is_storable_id(expense_id) else None
        if row is None:
            raise RecordNotFoundError(NOT_FOUND)
        return Expense.from_dict(row)

    def add(self, payload: Mapping[str, object]) -> Expense:
        data = self._validate_payload(payload)
        row = self._store.insert(**data)
        return Expense.from_dict(row)

    def update(self, raw_id: object, payload: Mapping[str, object]) -> Expense:
        expense_id = parse_expense_id(raw_id)
        data = self._validate_payload(payload)
        # Conditional UPDATE ... RETURNING: existence and mutation are one statement.
        row = self._store.update(expense_id, **data) if is_storable_id(expense_id) else None
        if row is None:
            raise RecordNotFoundError(NOT_FOUND)
        return Expense.from_dict(row)

    def delete(self, raw_id: object) -> None:
        expense_id = parse_expense_id(raw_id)
        if not is_storable_id(expense_id) or self._store.delete(expense_id) == 0:
            raise RecordNotFoundError(NOT_FOUND)

    # Internal helpers -----------------------------------------------------
    @staticmethod
    def _validate_payload(payload: Mapping[str, object]) -> Dict[str, object]:
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        # Fail fast: the first broken rule wins, in this order.
        return {
            "description": validate_required_str(payload.get("description"), DESCRIPTION_REQUIRED),
            "amount": parse_amount(payload.get("amount")),
            "category": validate_required_str(payload.get("category"), CATEGORY_REQUIRED),
        }
