from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx
import pytest

from src.handout.ingest.ingest_errors import ConversionFailedError, StorageExhaustedError
from src.handout.ingest.ingest_models import DegradeReason
from src.handout.ingest.ingest_service import IngestService
from src.handout.ingest.placeholder import placeholder_data_uri
from src.handout.ingest.validation import UploadValidator
from src.handout.media.asset_store import AssetStore
from src.handout.media.media_cleanup import EvictionSweeper
from src.handout.media.media_errors import StorageError
from src.handout.media.quota import QuotaGate
from tests.helpers.pptx_factory import build_package
from tests.mocks.converter import StubRenderClient


def _service(
    tmp_path: Path,
    converter: StubRenderClient,
    *,
    max_size_bytes: int = 10 * 1024 * 1024,
    fetch_concurrency: int = 2,
) -> IngestService:
    store = AssetStore(root=tmp_path / "uploads")
    return IngestService(
        converter=converter,
        store=store,
        quota=QuotaGate(store=store, max_size_bytes=max_size_bytes),
        validator=UploadValidator(max_upload_bytes=1024 * 1024),
        sweeper=EvictionSweeper(store=store, idle_threshold=timedelta(minutes=30)),
        public_url_prefix="/uploads/",
        fetch_concurrency=fetch_concurrency,
    )


@pytest.mark.asyncio
async def test_ingest_returns_one_record_per_page_in_order(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=5)
    service = _service(tmp_path, converter)
    package = build_package({1: "One", 2: "Two", 5: "Five"}, slide_count=5)

    records = await service.ingest(package, filename="deck.pptx")

    assert [record.slide_number for record in records] == [1, 2, 3, 4, 5]
    assert [record.notes for record in records] == ["One", "Two", "", "", "Five"]
    assert converter.submitted == ["deck.pptx"]
    stored = {asset.name for asset in service.store.list()}
    assert len(stored) == 5
    for record in records:
        assert record.image.asset_name in stored
        assert record.image.url == f"/uploads/{record.image.asset_name}"
        assert record.image.asset_name.startswith(f"slide_{record.slide_number}_")


@pytest.mark.asyncio
async def test_failed_download_degrades_only_that_slide(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=5, failing={"/images/page-3.png"})
    service = _service(tmp_path, converter)
    package = build_package({3: "Lost image, kept slot"}, slide_count=5)

    outcomes = await service.ingest_outcomes(package)

    assert len(outcomes) == 5
    degraded = [outcome for outcome in outcomes if outcome.degraded]
    assert [outcome.record.slide_number for outcome in degraded] == [3]
    assert degraded[0].degraded_reason is DegradeReason.DOWNLOAD_FAILED
    assert degraded[0].record.image.url == placeholder_data_uri(3)
    assert degraded[0].record.image.is_placeholder
    assert degraded[0].record.notes == ""
    assert len(service.store.list()) == 4


@pytest.mark.asyncio
async def test_missing_locators_degrade_trailing_slides(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=3, locators=["/images/page-1.png"])
    service = _service(tmp_path, converter)

    outcomes = await service.ingest_outcomes(build_package(slide_count=3))

    assert [outcome.degraded_reason for outcome in outcomes] == [
        None,
        DegradeReason.MISSING_LOCATOR,
        DegradeReason.MISSING_LOCATOR,
    ]
    assert converter.fetched == ["/images/page-1.png"]


@pytest.mark.asyncio
async def test_malformed_notes_yield_empty_text(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=3)
    service = _service(tmp_path, converter)
    package = build_package({1: "Fine", 2: b"<p:notes><broken", 3: "Also fine"}, slide_count=3)

    records = await service.ingest(package)

    assert [record.notes for record in records] == ["Fine", "", "Also fine"]
    assert all(not record.image.is_placeholder for record in records)


@pytest.mark.asyncio
async def test_conversion_failure_aborts_without_writing(tmp_path: Path) -> None:
    converter = StubRenderClient(
        page_count=3, submit_error=ConversionFailedError("converter down")
    )
    service = _service(tmp_path, converter)

    with pytest.raises(ConversionFailedError):
        await service.ingest(build_package(slide_count=3))

    assert converter.fetched == []
    assert service.store.list() == []


@pytest.mark.asyncio
async def test_storage_exhausted_refuses_before_conversion(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=2)
    service = _service(tmp_path, converter, max_size_bytes=16)
    service.store.put(b"x" * 16, slide_number=1)

    with pytest.raises(StorageExhaustedError) as excinfo:
        await service.ingest(build_package(slide_count=2))

    assert excinfo.value.status.can_upload is False
    assert converter.submitted == []
    assert converter.fetched == []


@pytest.mark.asyncio
async def test_zero_pages_yields_empty_batch(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=0)
    service = _service(tmp_path, converter)

    assert await service.ingest(build_package()) == []


@pytest.mark.asyncio
async def test_unreadable_archive_still_renders_slides(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=2)
    service = _service(tmp_path, converter)

    records = await service.ingest(b"PK\x03\x04 truncated")

    assert [record.notes for record in records] == ["", ""]
    assert all(not record.image.is_placeholder for record in records)


@pytest.mark.asyncio
async def test_failed_write_degrades_slide(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    converter = StubRenderClient(page_count=2)
    service = _service(tmp_path, converter)
    original_put = AssetStore.put

    def flaky_put(self: AssetStore, data: bytes, *, slide_number: int, **kwargs):
        if slide_number == 2:
            raise StorageError("disk full")
        return original_put(self, data, slide_number=slide_number, **kwargs)

    monkeypatch.setattr(AssetStore, "put", flaky_put)

    outcomes = await service.ingest_outcomes(build_package(slide_count=2))

    assert outcomes[0].degraded is False
    assert outcomes[1].degraded_reason is DegradeReason.STORAGE_WRITE_FAILED


@pytest.mark.asyncio
async def test_jpeg_pages_are_stored_with_jpg_suffix(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=1, content_type="image/jpeg")
    service = _service(tmp_path, converter)

    records = await service.ingest(build_package(slide_count=1))

    assert records[0].image.asset_name.endswith(".jpg")


@pytest.mark.asyncio
async def test_malformed_locator_degrades_only_that_slide(tmp_path: Path) -> None:
    locators = ("/a.png", "/bad\x7f.png", "/c.png")
    converter = StubRenderClient(
        page_count=3,
        locators=locators,
        raising={"/bad\x7f.png": httpx.InvalidURL("Invalid non-printable ASCII character in URL")},
    )
    service = _service(tmp_path, converter)

    outcomes = await service.ingest_outcomes(build_package({1: "A", 2: "B", 3: "C"}, slide_count=3))

    assert [outcome.record.slide_number for outcome in outcomes] == [1, 2, 3]
    assert outcomes[1].degraded_reason is DegradeReason.UNEXPECTED_ERROR
    assert outcomes[1].record.image.url == placeholder_data_uri(2)
    assert [outcome.record.notes for outcome in outcomes] == ["A", "", "C"]
    assert len(service.store.list()) == 2


@pytest.mark.asyncio
async def test_records_keep_page_order_when_fetches_finish_out_of_order(tmp_path: Path) -> None:
    delays = {f"/images/page-{index}.png": (4 - index) * 0.03 for index in range(1, 5)}
    converter = StubRenderClient(page_count=4, delays=delays)
    service = _service(tmp_path, converter, fetch_concurrency=4)

    records = await service.ingest(build_package(slide_count=4))

    assert converter.completed[0] == "/images/page-4.png"
    assert [record.slide_number for record in records] == [1, 2, 3, 4]
    assert [record.image.asset_name.split("_")[1] for record in records] == ["1", "2", "3", "4"]


@pytest.mark.asyncio
async def test_admission_sweeps_idle_assets_first(tmp_path: Path) -> None:
    converter = StubRenderClient(page_count=1)
    service = _service(tmp_path, converter, max_size_bytes=64)
    long_ago = datetime.now(timezone.utc) - timedelta(hours=2)
    for index in range(1, 5):
        service.store.put(b"x" * 16, slide_number=index, now=long_ago)
    assert service.quota.admit() is False

    records = await service.ingest(build_package(slide_count=1))

    assert len(records) == 1
    assert [asset.name for asset in service.store.list()] == [records[0].image.asset_name]


@pytest.mark.asyncio
async def test_sweep_failure_does_not_block_ingestion(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    converter = StubRenderClient(page_count=2)
    service = _service(tmp_path, converter)

    def broken_sweep(self: EvictionSweeper, now=None):
        raise StorageError("cannot list asset directory")

    monkeypatch.setattr(EvictionSweeper, "sweep", broken_sweep)

    records = await service.ingest(build_package(slide_count=2))

    assert [record.slide_number for record in records] == [1, 2]
    assert converter.submitted == ["presentation.pptx"]


@pytest.mark.asyncio
async def test_admission_runs_off_the_event_loop_thread(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    converter = StubRenderClient(page_count=1)
    service = _service(tmp_path, converter)
    loop_thread = threading.get_ident()
    admission_threads: list[int] = []
    original_check = IngestService.check_admission

    def recording_check(self: IngestService):
        admission_threads.append(threading.get_ident())
        return original_check(self)

    monkeypatch.setattr(IngestService, "check_admission", recording_check)

    await service.ingest(build_package(slide_count=1))

    assert len(admission_threads) == 1
    assert admission_threads[0] != loop_thread
