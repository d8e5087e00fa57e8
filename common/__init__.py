"""Core business logic package for the expense tracker."""

from .config import Settings
from .models import Expense
from .services import ExpenseService
from .storage import SQLStore, build_engine
from .exceptions import PersistenceError, ValidationError, RecordNotFoundError

__all__ = [
    "Expense",
    "ExpenseService",
    "SQLStore",
    "Settings",
    "build_engine",
    "PersistenceError",
    "ValidationError",
    "RecordNotFoundError",
]
