"""
Shared fixtures: an app bound to a temporary sqlite file, its test client,
and a helper that logs in through /jwt.
"""

import sys
from pathlib import Path

import pytest

# 프로젝트 루트를 파이썬 경로에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import Database
from webapp.app import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def app(tmp_path):
    return create_app({
        "TESTING": True,
        "DB_PATH": tmp_path / "marathon.db",
        "ACCESS_TOKEN_SECRET": TEST_SECRET,
        "IS_PRODUCTION": False,
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.extensions["marathon_services"]


@pytest.fixture
def db(app):
    return Database(app.config["DB_PATH"])


@pytest.fixture
def login(client):
    def _login(email):
        resp = client.post("/jwt", json={"email": email})
        assert resp.status_code == 200
        return resp
    return _login


@pytest.fixture
def create_marathon(client):
    def _create(**fields):
        resp = client.post("/marathons", json=fields)
        assert resp.status_code == 201
        return resp.get_json()["insertedId"]
    return _create


@pytest.fixture
def register(client):
    def _register(marathon_id, **fields):
        resp = client.post("/registerMarathon", json={"marathonId": marathon_id, **fields})
        assert resp.status_code == 201
        return resp.get_json()["insertedId"]
    return _register
