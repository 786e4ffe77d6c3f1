# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

"""Shared fixtures: an in-memory SQLite database and a clean service registry."""

import pytest

from sqlalchemy import create_engine

from fastfield.dependencies import clear_services
from fastfield.relations import metadata


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def connection(engine):
    with engine.connect() as connection:
        yield connection


@pytest.fixture(autouse=True)
def services():
    clear_services()

    yield

    clear_services()
