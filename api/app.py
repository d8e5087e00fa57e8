"""Flask REST API exposing the expense tracker services."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Iterable, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from common.config import Settings
from common.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from common.services import ExpenseService
from common.storage import SQLStore, build_engine

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]


def create_app(settings: Optional[Settings] = None, store: Optional[SQLStore] = None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()

    if settings.is_dev:
        CORS(app, resources={r"/*": {"origins": "*"}}, methods=CORS_METHODS, allow_headers=CORS_HEADERS)
    else:
        CORS(
            app,
            resources={r"/*": {"origins": settings.allowed_origins}},
            methods=CORS_METHODS,
            allow_headers=CORS_HEADERS,
        )

    if store is None:
        store = SQLStore(build_engine(settings.sqlalchemy_url()))
    expense_service = ExpenseService(store)
    app.extensions["expense_store"] = store

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.warning("%s: %s", message, exc)
        return jsonify({"error": message}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, str(exc))

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, str(exc))

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        app.logger.exception("Persistence error: %s", exc)
        return jsonify({"error": "Internal server error"}), 500

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError("Malformed JSON body")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.get("/health")
    def health():
        return _success({"status": "ok"})

    @app.get("/expenses")
    def list_expenses():
        expenses = expense_service.list()
        return _success([expense.to_dict() for expense in expenses])

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        expense = expense_service.add(payload)
        app.logger.info("Created expense %s", expense.id)
        return _success(expense.to_dict(), 201)

    @app.get("/expenses/<expense_id>")
    def get_expense(expense_id: str):
        expense = expense_service.get(expense_id)
        return _success(expense.to_dict())

    @app.put("/expenses/<expense_id>")
    def update_expense(expense_id: str):
        payload = _json_body()
        expense = expense_service.update(expense_id, payload)
        return _success(expense.to_dict())

    @app.delete("/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        expense_service.delete(expense_id)
        app.logger.info("Deleted expense %s", expense_id)
        return _success({}, 204)

    return app


def main(argv: Optional[Iterable[str]] = None) -> None:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="REST API for the expense tracker")
    parser.add_argument("--host", default=settings.host, help=f"Interface to bind (default: {settings.host})")
    parser.add_argument("--port", default=settings.port, type=int, help=f"Port to listen on (default: {settings.port})")
    parser.add_argument("--debug", action="store_true", help="Run the Flask debug server")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(settings)
    store: SQLStore = app.extensions["expense_store"]
    try:
        store.create_schema()
        app.logger.info("Connected to database: %s", store.ping())
    except PersistenceError as exc:
        app.logger.error("Database connection error: %s", exc.__cause__ or exc)

    app.logger.info("Server running on port %s", args.port)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
