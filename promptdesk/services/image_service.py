"""
Image service - attaches uploaded images to prompts.

Files go through FileStorage; only URL paths and metadata are kept in the
database.
"""
import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from promptdesk.core.exceptions import ImageNotFoundException, PromptNotFoundException
from promptdesk.core.logging import operation_logger
from promptdesk.models.schemas import ImageResponse
from promptdesk.repositories import image_db_repository, prompt_db_repository
from promptdesk.services.file_storage import FileStorage, sanitize_filename, to_url_path

logger = logging.getLogger(__name__)


class ImageService:
    """Image operations within one database session."""

    def __init__(self, session: AsyncSession, storage: FileStorage):
        self.session = session
        self.storage = storage

    @operation_logger("image_upload")
    async def upload(self, prompt_id: str, data: bytes, filename: str, mime_type: str) -> ImageResponse:
        """
        Validate and store an upload, then record it against a live prompt.

        Nothing is written for a missing or deleted prompt. If the database row
        can't be written, the stored files are removed again.
        """
        prompt = await prompt_db_repository.get_by_id(self.session, prompt_id)
        if prompt is None or prompt.is_deleted:
            raise PromptNotFoundException(prompt_id)

        original_filename = sanitize_filename(filename)
        saved = await self.storage.save_image(data, original_filename, mime_type)

        try:
            image = await image_db_repository.create(
                self.session,
                prompt_id=prompt_id,
                filename=original_filename,
                stored_name=saved.stored_name,
                mime_type=mime_type,
                size=saved.metadata.size,
                path=to_url_path(saved.path),
                thumbnail=to_url_path(saved.thumbnail),
                width=saved.metadata.width,
                height=saved.metadata.height,
            )
        except Exception:
            await self.storage.delete_image(saved.path, saved.thumbnail)
            raise

        return ImageResponse.model_validate(image)

    async def list_by_prompt(self, prompt_id: str) -> List[ImageResponse]:
        images = await image_db_repository.list_by_prompt(self.session, prompt_id)
        return [ImageResponse.model_validate(image) for image in images]

    @operation_logger("image_delete")
    async def delete(self, image_id: str) -> None:
        """
        Remove an image row, then both of its files.

        Files that are already missing are ignored.
        """
        image = await image_db_repository.get_by_id(self.session, image_id)
        if image is None:
            raise ImageNotFoundException(image_id)

        path, thumbnail = image.path, image.thumbnail
        await image_db_repository.delete_by_id(self.session, image_id)
        await self.storage.delete_image(path, thumbnail)

    async def fix_paths(self) -> int:
        """
        Rewrite stored image and thumbnail paths that contain backslashes.

        Returns the number of rows changed.
        """
        updated = 0
        for image in await image_db_repository.list_all(self.session):
            path, thumbnail = to_url_path(image.path), to_url_path(image.thumbnail)
            if path != image.path or thumbnail != image.thumbnail:
                logger.info(f"Fixing paths of image {image.id}: {image.path} -> {path}")
                await image_db_repository.update_paths(self.session, image, path=path, thumbnail=thumbnail)
                updated += 1
        return updated
