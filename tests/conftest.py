from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from api.app import create_app
from common.config import Settings
from common.services import ExpenseService
from common.storage import SQLStore


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def store(engine):
    sql_store = SQLStore(engine)
    sql_store.create_schema()
    return sql_store


@pytest.fixture()
def service(store):
    return ExpenseService(store)


@pytest.fixture()
def settings():
    return Settings.from_env({})


@pytest.fixture()
def app(settings, store):
    flask_app = create_app(settings, store=store)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()
