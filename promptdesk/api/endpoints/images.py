"""
Image API endpoints - upload, list and delete images attached to prompts.
"""
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from starlette.datastructures import UploadFile

from promptdesk.api.deps import get_app_settings, get_image_service
from promptdesk.core.config import Settings
from promptdesk.core.exceptions import ImageValidationException, ValidationException
from promptdesk.models.schemas import ImageListResponse, ImageResponse
from promptdesk.services.image_service import ImageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


@router.post("/prompts/{prompt_id}/images", response_model=ImageResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    prompt_id: str,
    request: Request,
    service: ImageService = Depends(get_image_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Upload one image (multipart, any field name) to a prompt.

    Accepts JPEG, PNG, GIF and WebP up to 5 MiB and 4096x4096 px.
    """
    async with request.form() as form:
        upload = next((value for value in form.values() if isinstance(value, UploadFile)), None)
        if upload is None:
            raise ValidationException("No file uploaded")

        data = await upload.read(settings.max_upload_bytes + 1)
        if len(data) > settings.max_upload_bytes:
            raise ImageValidationException(
                f"File size exceeds maximum of {settings.max_upload_bytes} bytes"
            )

        return await service.upload(
            prompt_id,
            data=data,
            filename=upload.filename or "upload",
            mime_type=upload.content_type or "application/octet-stream",
        )


@router.get("/prompts/{prompt_id}/images", response_model=ImageListResponse)
async def list_images(prompt_id: str, service: ImageService = Depends(get_image_service)):
    """Images of a prompt, newest first."""
    return ImageListResponse(data=await service.list_by_prompt(prompt_id))


@router.delete("/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(image_id: str, service: ImageService = Depends(get_image_service)):
    """Delete an image and its files."""
    await service.delete(image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
