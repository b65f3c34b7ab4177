"""Shared fixtures: a temporary SQLite store, the app container and an HTTP client."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from fastapi.testclient import TestClient

from server.api import create_app
from tools.document_store import SQLiteDocumentStore
from tools.recognition_provider import MockRecognitionProvider
from vesture_app.app import VestureApp
from vesture_app.config import AppConfig


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        jwt_secret="test-secret",
        database_path=str(tmp_path / "vesture.db"),
        environment="test",
    )


@pytest.fixture()
def store(tmp_path: Path) -> SQLiteDocumentStore:
    return SQLiteDocumentStore(tmp_path / "documents.db")


@pytest.fixture()
def recognition() -> MockRecognitionProvider:
    return MockRecognitionProvider()


@pytest.fixture()
def container(config: AppConfig, recognition: MockRecognitionProvider) -> VestureApp:
    return VestureApp(config, recognition=recognition)


@pytest.fixture()
def client(container: VestureApp) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture()
def register(client: TestClient) -> Callable[..., Dict[str, str]]:
    """Register a user over HTTP and return its id plus auth headers."""

    def _register(username: str, email: str | None = None, password: str = "secret123") -> Dict[str, str]:
        response = client.post(
            "/api/users",
            json={"username": username, "email": email or f"{username}@example.com", "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return {"id": body["user_id"], "headers": {"Authorization": f"Bearer {body['token']}"}}

    return _register
