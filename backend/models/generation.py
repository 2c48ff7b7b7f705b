from pydantic import BaseModel
from typing import Any, Dict, List, Optional

DEFAULT_OUTPUT_CONTENT_TYPE = "image/png"


class UploadedImage(BaseModel):
    content: bytes
    content_type: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return len(self.content) == 0


class GenerationRequest(BaseModel):
    prompt: str
    image_input: List[str]  # data URLs

    def to_input(self) -> Dict[str, Any]:
        return {"prompt": self.prompt, "image_input": list(self.image_input)}


class OutputImage(BaseModel):
    content: bytes
    content_type: str = DEFAULT_OUTPUT_CONTENT_TYPE


class ErrorResponse(BaseModel):
    error: str
    status: Optional[int] = None  # upstream status for failed result fetches


class ServiceHealthResponse(BaseModel):
    configured: bool
    model: str
    message: str
