"""
Unit tests — Object storage (services/storage_service.py).

Uses pytest's tmp_path as the storage root; nothing outside it is touched.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from challenge_bot.errors import StorageError
from challenge_bot.services.storage_service import ObjectStorage, screenshot_path


@pytest.fixture
def bucket(tmp_path) -> ObjectStorage:
    return ObjectStorage(tmp_path, "https://files.example.com/storage/", bucket="registrations")


class TestScreenshotPath:

    def test_layout(self) -> None:
        now = datetime(2025, 8, 1, tzinfo=timezone.utc)
        path = screenshot_path(42, "IMG_001.PNG", now=now)
        assert path == f"payment-screenshots/42_{int(now.timestamp() * 1000)}.png"

    def test_extension_from_mime_when_name_has_none(self) -> None:
        assert screenshot_path(42, "photo", mime_type="image/webp").endswith(".webp")

    def test_default_extension(self) -> None:
        assert screenshot_path(42, "photo").endswith(".jpg")


class TestObjectStorage:

    async def test_upload_writes_file_and_returns_public_url(self, bucket, tmp_path) -> None:
        url = await bucket.upload("payment-screenshots/1_1.png", b"\x89PNG")
        assert url == "https://files.example.com/storage/registrations/payment-screenshots/1_1.png"
        assert (tmp_path / "registrations" / "payment-screenshots" / "1_1.png").read_bytes() == b"\x89PNG"

    async def test_upload_refuses_overwrite(self, bucket) -> None:
        await bucket.upload("a/b.png", b"1")
        with pytest.raises(StorageError):
            await bucket.upload("a/b.png", b"2")

    @pytest.mark.parametrize("bad", ["", "/etc/passwd", "../outside.png", "a/../../b.png"])
    async def test_invalid_paths_rejected(self, bucket, bad: str) -> None:
        with pytest.raises(StorageError):
            await bucket.upload(bad, b"x")

    def test_public_url_is_quoted(self, bucket) -> None:
        url = bucket.get_public_url("payment-screenshots/my shot.png")
        assert url.endswith("/registrations/payment-screenshots/my%20shot.png")

    async def test_upload_screenshot(self, bucket, tmp_path) -> None:
        uploaded = await bucket.upload_screenshot(7, "pay.jpeg", b"data", mime_type="image/jpeg")
        assert uploaded.name.startswith("7_")
        assert uploaded.name.endswith(".jpeg")
        assert uploaded.url.endswith(f"/payment-screenshots/{uploaded.name}")
        assert (tmp_path / "registrations" / "payment-screenshots" / uploaded.name).exists()

    async def test_delete_screenshot_removes_object(self, bucket, tmp_path) -> None:
        uploaded = await bucket.upload_screenshot(7, "pay.png", b"data")
        stored = tmp_path / "registrations" / "payment-screenshots" / uploaded.name
        assert stored.exists()

        await bucket.delete_screenshot(uploaded)
        assert not stored.exists()

    async def test_delete_missing_object_is_noop(self, bucket) -> None:
        await bucket.delete("payment-screenshots/never-stored.png")

    async def test_delete_rejects_invalid_path(self, bucket) -> None:
        with pytest.raises(StorageError):
            await bucket.delete("../outside.png")
