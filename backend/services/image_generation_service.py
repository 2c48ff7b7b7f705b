import base64
import logging
from typing import Any, Optional

import httpx
import replicate

from core.errors import UpstreamError
from models.generation import (
    DEFAULT_OUTPUT_CONTENT_TYPE,
    GenerationRequest,
    OutputImage,
    UploadedImage,
)

logger = logging.getLogger(__name__)

POLYGON_INSTRUCTION = (
    "Apply the following updates only to the area inside the pink polygon. "
    "Never change anything outside of the pink polygon area."
)
FALLBACK_MEDIA_TYPE = "application/octet-stream"


def build_prompt(prompt: str) -> str:
    return f"{POLYGON_INSTRUCTION} {prompt}"


def to_data_url(content: bytes, content_type: Optional[str]) -> str:
    """Embed binary content as a base64 data URL"""
    media_type = content_type or FALLBACK_MEDIA_TYPE
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


def extract_result_url(output: Any) -> str:
    """
    Pull the retrievable URL out of a model output.

    Replicate file outputs expose ``url`` as a string; URL-like objects with an
    ``href`` (or accessors returning one) are accepted too.

    Raises:
        UpstreamError: If the output carries no URL
    """
    url = getattr(output, "url", None)
    if callable(url):
        url = url()
    if url is not None and hasattr(url, "href"):
        url = url.href
    if not url:
        logger.error("Image model returned no URL: %r", output)
        raise UpstreamError("Image model did not return a URL")
    return str(url)


class ImageGenerationService:
    def __init__(
        self,
        client: replicate.Client,
        model: str,
        fetch_timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = client
        self.model = model
        self.fetch_timeout = fetch_timeout
        self.transport = transport

    def build_request(self, image: UploadedImage, prompt: str) -> GenerationRequest:
        return GenerationRequest(
            prompt=build_prompt(prompt),
            image_input=[to_data_url(image.content, image.content_type)],
        )

    async def run_model(self, request: GenerationRequest) -> Any:
        """Run the hosted model and wait for its output"""
        logger.info("Running %s (%d input image(s))", self.model, len(request.image_input))
        return await self.client.async_run(self.model, input=request.to_input())

    async def fetch_image(self, url: str) -> OutputImage:
        """Download the generated image from the model's result URL"""
        async with httpx.AsyncClient(timeout=self.fetch_timeout, transport=self.transport) as client:
            response = await client.get(url)

        if not response.is_success:
            logger.error("Fetching generated image failed: %s %s", response.status_code, url)
            raise UpstreamError("Failed to fetch generated image", status=response.status_code)

        return OutputImage(
            content=response.content,
            content_type=response.headers.get("content-type") or DEFAULT_OUTPUT_CONTENT_TYPE,
        )

    async def generate(self, image: UploadedImage, prompt: str) -> OutputImage:
        """Edit the uploaded image inside its pink polygon and return the result bytes"""
        request = self.build_request(image, prompt)
        output = await self.run_model(request)
        result_url = extract_result_url(output)
        return await self.fetch_image(result_url)
