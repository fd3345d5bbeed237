from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from first_million.app import create_app
from first_million.config import Settings


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(database=str(tmp_path / "scenarios.db"), log_level="WARNING")


@pytest.fixture()
def client(settings: Settings) -> FlaskClient:
    flask_app = create_app(settings)
    with flask_app.test_client() as test_client:
        yield test_client
