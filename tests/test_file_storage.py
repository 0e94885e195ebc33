"""Tests for FileStorage: validation, thumbnails, deletion and path handling."""

import cv2
import numpy as np
import pytest

from promptdesk.core.exceptions import ImageValidationException
from promptdesk.services.file_storage import (
    MAX_FILE_SIZE,
    THUMBNAIL_SIZE,
    FileStorage,
    sanitize_filename,
    to_url_path,
)


def _stored_files(storage: FileStorage):
    return sorted(p.name for p in storage.root.rglob("*") if p.is_file())


class TestPathHelpers:

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.png", "photo.png"),
            ("my photo (1).png", "my_photo__1_.png"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\me\\shot.jpg", "shot.jpg"),
            ("ünïcode.webp", "_n_code.webp"),
        ],
    )
    def test_sanitize_filename(self, filename, expected):
        assert sanitize_filename(filename) == expected

    def test_to_url_path(self):
        assert to_url_path("uploads\\images\\a.png") == "uploads/images/a.png"

    def test_resolve_stays_inside_root(self, storage):
        assert storage.resolve("uploads/images/a.png") == (storage.root / "images" / "a.png").resolve()
        assert storage.resolve("uploads\\thumbnails\\b.jpg").name == "b.jpg"
        with pytest.raises(ValueError):
            storage.resolve("uploads/../../secret.txt")


class TestValidate:

    def test_returns_dimensions(self, storage, image_bytes):
        assert storage.validate(image_bytes(64, 48), "image/png") == (64, 48)

    def test_rejects_unsupported_type(self, storage, image_bytes):
        with pytest.raises(ImageValidationException, match="Unsupported image type"):
            storage.validate(image_bytes(), "image/bmp")

    def test_rejects_oversized_file(self, storage):
        with pytest.raises(ImageValidationException, match="File size exceeds maximum"):
            storage.validate(b"\x00" * (MAX_FILE_SIZE + 1), "image/png")

    def test_rejects_oversized_dimensions(self, storage, image_bytes):
        with pytest.raises(ImageValidationException, match="dimensions exceed maximum"):
            storage.validate(image_bytes(4097, 8), "image/png")

    def test_rejects_undecodable_bytes(self, storage):
        with pytest.raises(ImageValidationException, match="unable to read dimensions"):
            storage.validate(b"definitely not an image", "image/jpeg")


class TestSaveAndDelete:

    @pytest.mark.asyncio
    async def test_save_writes_original_and_square_thumbnail(self, storage, image_bytes):
        data = image_bytes(320, 120)

        saved = await storage.save_image(data, "wide photo.png", "image/png")

        assert saved.stored_name.endswith(".png")
        assert saved.path == f"uploads/images/{saved.stored_name}"
        assert saved.thumbnail == f"uploads/thumbnails/thumb_{saved.stored_name}"
        assert saved.metadata.width == 320
        assert saved.metadata.height == 120
        assert saved.metadata.format == "png"
        assert saved.metadata.size == len(data)

        assert storage.resolve(saved.path).read_bytes() == data
        thumbnail = cv2.imread(str(storage.resolve(saved.thumbnail)))
        assert thumbnail.shape[:2] == (THUMBNAIL_SIZE, THUMBNAIL_SIZE)

    @pytest.mark.asyncio
    async def test_small_images_are_upscaled_for_thumbnail(self, storage, image_bytes):
        saved = await storage.save_image(image_bytes(20, 10, ".jpg"), "tiny.jpg", "image/jpeg")

        thumbnail = cv2.imread(str(storage.resolve(saved.thumbnail)))
        assert thumbnail.shape[:2] == (THUMBNAIL_SIZE, THUMBNAIL_SIZE)
        assert saved.metadata.format == "jpeg"

    @pytest.mark.asyncio
    async def test_rejected_upload_writes_nothing(self, storage, image_bytes):
        with pytest.raises(ImageValidationException):
            await storage.save_image(image_bytes(), "a.txt", "text/plain")
        with pytest.raises(ImageValidationException):
            await storage.save_image(image_bytes(5000, 4), "huge.png", "image/png")

        assert _stored_files(storage) == []

    @pytest.mark.asyncio
    async def test_delete_removes_both_files(self, storage, image_bytes):
        saved = await storage.save_image(image_bytes(), "a.png", "image/png")
        assert len(_stored_files(storage)) == 2

        await storage.delete_image(saved.path, saved.thumbnail)
        assert _stored_files(storage) == []

        # Deleting again is a no-op
        await storage.delete_image(saved.path, saved.thumbnail)

    @pytest.mark.asyncio
    async def test_delete_ignores_paths_outside_root(self, storage, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")

        await storage.delete_image("uploads/../keep.txt", "uploads/../keep.txt")
        assert outside.exists()


def test_cover_crop_keeps_center():
    from promptdesk.services.file_storage import _cover_crop

    image = np.zeros((100, 300, 3), dtype=np.uint8)
    image[:, 100:200] = 255

    cropped = _cover_crop(image, 50)

    assert cropped.shape[:2] == (50, 50)
    assert cropped.mean() > 250
