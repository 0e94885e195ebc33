"""
On-disk storage for uploaded prompt images.

Originals go to ``<root>/images`` and 200x200 JPEG thumbnails to
``<root>/thumbnails``. Everything handed back to callers is a URL path
relative to the server root (``uploads/images/<name>``), always with
forward slashes, so it can be stored in the database and served as-is.
"""
import asyncio
import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Tuple

import aiofiles
import cv2
import numpy as np

from promptdesk.core.exceptions import FileOperationException, ImageValidationException

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)
MAX_FILE_SIZE = 5 * 1024 * 1024
MAX_IMAGE_DIMENSION = 4096
THUMBNAIL_SIZE = 200
THUMBNAIL_QUALITY = 80

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass
class ImageMetadata:
    width: int
    height: int
    format: str
    size: int


@dataclass
class SavedImage:
    stored_name: str
    path: str
    thumbnail: str
    metadata: ImageMetadata


def sanitize_filename(filename: str) -> str:
    """
    Reduce an uploaded filename to a safe basename.

    Directory components are dropped (either separator) and any character
    outside ``[A-Za-z0-9._-]`` becomes ``_``.
    """
    basename = re.split(r"[\\/]", filename or "")[-1]
    return _UNSAFE_FILENAME_CHARS.sub("_", basename)


def to_url_path(path: str) -> str:
    """Convert a stored file path to a URL path (backslashes become forward slashes)."""
    return path.replace("\\", "/")


def _decode(data: bytes) -> np.ndarray:
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageValidationException("Invalid image: unable to read dimensions")
    return image


def _cover_crop(image: np.ndarray, size: int) -> np.ndarray:
    """Scale ``image`` to cover a size x size square, then crop the center."""
    height, width = image.shape[:2]
    scale = max(size / width, size / height)
    resized_width = max(size, round(width * scale))
    resized_height = max(size, round(height * scale))
    interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
    resized = cv2.resize(image, (resized_width, resized_height), interpolation=interpolation)

    top = (resized_height - size) // 2
    left = (resized_width - size) // 2
    return resized[top:top + size, left:left + size]


def _encode_thumbnail(image: np.ndarray) -> bytes:
    thumbnail = _cover_crop(image, THUMBNAIL_SIZE)
    ok, encoded = cv2.imencode(".jpg", thumbnail, [cv2.IMWRITE_JPEG_QUALITY, THUMBNAIL_QUALITY])
    if not ok:
        raise ValueError("JPEG encoding failed")
    return encoded.tobytes()


def _format_from_mime(mime_type: str) -> str:
    subtype = mime_type.split("/", 1)[-1]
    return "jpeg" if subtype == "jpg" else subtype


class FileStorage:
    """
    Image store rooted at ``root`` (the server's ``uploads`` directory).

    ``url_prefix`` is the first segment of every returned URL path and matches
    the mount point of the static files route.
    """

    def __init__(self, root: Path, url_prefix: str = "uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix
        self.images_dir = self.root / "images"
        self.thumbnails_dir = self.root / "thumbnails"

    def initialize(self) -> None:
        """Create the upload directories if they are missing."""
        self.images_dir.mkdir(parents=True, exist_ok=True)
        self.thumbnails_dir.mkdir(parents=True, exist_ok=True)
        logger.info(
            "Upload directories initialized",
            extra={"context": {"images": str(self.images_dir), "thumbnails": str(self.thumbnails_dir)}},
        )

    def _url_path(self, *parts: str) -> str:
        return str(PurePosixPath(self.url_prefix, *parts))

    def resolve(self, url_path: str) -> Path:
        """
        Map a stored URL path back to a file under ``root``.

        Raises ValueError for paths that point outside the storage root.
        """
        parts = PurePosixPath(to_url_path(url_path)).parts
        if parts and parts[0] == self.url_prefix:
            parts = parts[1:]
        candidate = self.root.joinpath(*parts).resolve()
        root = self.root.resolve()
        if candidate != root and root not in candidate.parents:
            raise ValueError(f"Path escapes storage root: {url_path}")
        return candidate

    def validate(self, data: bytes, mime_type: str) -> Tuple[int, int]:
        """
        Check type, size and dimensions of an upload. Returns (width, height).

        Nothing is written to disk here.
        """
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise ImageValidationException(
                f"Unsupported image type: {mime_type}. Supported types: {', '.join(SUPPORTED_MIME_TYPES)}"
            )
        if len(data) > MAX_FILE_SIZE:
            raise ImageValidationException(
                f"File size exceeds maximum: {len(data)} bytes (max: {MAX_FILE_SIZE} bytes)"
            )

        height, width = _decode(data).shape[:2]
        if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
            raise ImageValidationException(
                f"Image dimensions exceed maximum: {width}x{height} "
                f"(max: {MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION})"
            )
        return width, height

    async def save_image(self, data: bytes, original_filename: str, mime_type: str) -> SavedImage:
        """
        Validate an upload, store it under a UUID name and generate its thumbnail.

        If the thumbnail can't be produced the stored original is removed again.
        """
        width, height = await asyncio.to_thread(self.validate, data, mime_type)

        extension = os.path.splitext(sanitize_filename(original_filename))[1]
        stored_name = f"{uuid.uuid4()}{extension}"
        thumbnail_name = f"thumb_{stored_name}"
        image_file = self.images_dir / stored_name
        thumbnail_file = self.thumbnails_dir / thumbnail_name

        self.initialize()
        try:
            async with aiofiles.open(image_file, "wb") as f:
                await f.write(data)
        except OSError as e:
            raise FileOperationException("write", str(image_file), str(e))

        try:
            thumbnail = await asyncio.to_thread(lambda: _encode_thumbnail(_decode(data)))
            async with aiofiles.open(thumbnail_file, "wb") as f:
                await f.write(thumbnail)
        except (OSError, ValueError, cv2.error) as e:
            logger.error(f"Failed to generate thumbnail for {stored_name}: {e}")
            self._unlink_quietly(image_file)
            self._unlink_quietly(thumbnail_file)
            raise FileOperationException("thumbnail", str(thumbnail_file), str(e))

        logger.info(
            f"Image saved: {stored_name}",
            extra={
                "context": {
                    "original": original_filename,
                    "stored": stored_name,
                    "size": len(data),
                    "dimensions": f"{width}x{height}",
                }
            },
        )

        return SavedImage(
            stored_name=stored_name,
            path=self._url_path("images", stored_name),
            thumbnail=self._url_path("thumbnails", thumbnail_name),
            metadata=ImageMetadata(
                width=width,
                height=height,
                format=_format_from_mime(mime_type),
                size=len(data),
            ),
        )

    async def delete_image(self, path: str, thumbnail_path: str) -> None:
        """Remove an image and its thumbnail. Files that are already gone are ignored."""
        for url_path in (path, thumbnail_path):
            try:
                target = self.resolve(url_path)
            except ValueError:
                logger.warning(f"Refusing to delete file outside storage root: {url_path}")
                continue
            await asyncio.to_thread(self._unlink_quietly, target)
        logger.info(f"Image deleted: {path}")

    @staticmethod
    def _unlink_quietly(target: Path) -> None:
        try:
            target.unlink()
        except FileNotFoundError:
            pass
