"""End-to-end flow through the assembled application with a stubbed converter."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.handout.config import AppConfig
from src.handout.main import create_app
from tests.helpers.pptx_factory import build_package
from tests.mocks.converter import StubRenderClient


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        storage_root=tmp_path / "uploads",
        max_storage_bytes=10 * 1024 * 1024,
        sweep_interval_minutes=0,
        cron_secret="integration-secret",
    )


@pytest.fixture()
def converter() -> StubRenderClient:
    return StubRenderClient(page_count=3, failing={"/images/page-2.png"})


@pytest.fixture()
def client(config: AppConfig, converter: StubRenderClient):
    app = create_app(config)
    app.state.ingest_service.converter = converter
    with TestClient(app) as test_client:
        yield test_client


def test_upload_serve_and_inspect(client: TestClient, converter: StubRenderClient) -> None:
    package = build_package({1: "Welcome", 2: "Numbers", 3: "Thanks"}, slide_count=3)

    response = client.post(
        "/api/process-pptx",
        files={"file": ("talk.pptx", package, "application/octet-stream")},
    )

    assert response.status_code == 200
    slides = response.json()["slides"]
    assert [slide["slideNumber"] for slide in slides] == [1, 2, 3]
    assert slides[0]["notes"] == "Welcome"
    assert slides[1]["imageUrl"].startswith("data:image/svg+xml;base64,")
    assert slides[1]["notes"] == ""
    assert slides[2]["notes"] == "Thanks"
    assert converter.submitted == ["talk.pptx"]

    served = client.get(slides[0]["imageUrl"])
    assert served.status_code == 200
    assert served.content == b"image:/images/page-1.png"
    assert served.headers["content-type"] == "image/png"

    stats = client.get("/api/system/files").json()
    assert stats["stats"]["totalFiles"] == 2

    status = client.get("/api/storage-cleanup", params={"action": "status"}).json()
    assert status["storage"]["canUpload"] is True

    cron = client.get("/api/cron/cleanup", params={"key": "integration-secret"})
    assert cron.status_code == 200
    assert cron.json()["result"]["cleanup"]["deletedFiles"] == []


def test_non_package_upload_is_rejected(client: TestClient, converter: StubRenderClient) -> None:
    response = client.post(
        "/api/process-pptx",
        files={"file": ("notes.txt", b"plain text", "text/plain")},
    )

    assert response.status_code == 415
    assert converter.submitted == []


def test_full_store_refuses_upload(config: AppConfig, converter: StubRenderClient) -> None:
    small = config.model_copy(update={"max_storage_bytes": 8})
    app = create_app(small)
    app.state.ingest_service.converter = converter
    app.state.asset_store.put(b"x" * 8, slide_number=1)

    with TestClient(app) as test_client:
        response = test_client.post(
            "/api/process-pptx",
            files={"file": ("talk.pptx", build_package(slide_count=1), "application/octet-stream")},
        )

    assert response.status_code == 413
    assert response.json()["detail"]["storage"]["canUpload"] is False
    assert converter.submitted == []
