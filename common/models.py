"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping

__all__ = ["Expense"]


@dataclass(frozen=True)
class Expense:
    id: int
    description: str
    amount: Decimal
    category: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": float(self.amount),
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data or a database row mapping."""
        return cls(
            id=int(data["id"]),
            description=data["description"],
            amount=Decimal(str(data["amount"])),
            category=data["category"],
        )
