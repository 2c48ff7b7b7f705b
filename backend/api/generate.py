import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import Response
from starlette.datastructures import UploadFile as StarletteUploadFile

from core.errors import ImageGenerationError, ValidationError, classify_error
from models.generation import ErrorResponse, ServiceHealthResponse, UploadedImage
from services.image_generation_service import ImageGenerationService

router = APIRouter(prefix="/generate", tags=["generate"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


def get_image_generation_service(request: Request) -> ImageGenerationService:
    settings = request.app.state.settings
    return ImageGenerationService(
        client=request.app.state.replicate_client,
        model=settings.REPLICATE_MODEL,
        fetch_timeout=settings.RESULT_FETCH_TIMEOUT,
    )


@router.post(
    "",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}, **ERROR_RESPONSES},
)
async def generate_image(
    image: Union[UploadFile, str, None] = File(None),
    prompt: Optional[str] = Form(None),
    service: ImageGenerationService = Depends(get_image_generation_service),
):
    """Edit the uploaded image inside its pink polygon according to the prompt"""
    # A plain text "image" field counts as no upload
    if not isinstance(image, StarletteUploadFile):
        raise ValidationError("No image file uploaded")

    uploaded = UploadedImage(content=await image.read(), content_type=image.content_type)
    if uploaded.is_empty:
        raise ValidationError("No image file uploaded")

    if not prompt:
        raise ValidationError("Prompt is required")

    try:
        result = await service.generate(uploaded, prompt)
    except ImageGenerationError:
        raise
    except Exception as e:
        logger.exception("Image generation error: %s", e)
        raise classify_error(e) from e

    return Response(
        content=result.content,
        headers={
            "Content-Type": result.content_type,
            "Access-Control-Allow-Origin": "*",
        },
    )


@router.get("/health", response_model=ServiceHealthResponse)
async def check_replicate_config(request: Request):
    """Check if the Replicate credential is configured"""
    settings = request.app.state.settings
    has_token = bool(settings.REPLICATE_API_TOKEN)

    return ServiceHealthResponse(
        configured=has_token,
        model=settings.REPLICATE_MODEL,
        message="Replicate API token configured" if has_token else "Replicate API token not set",
    )
