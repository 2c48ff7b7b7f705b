"""
Error taxonomy for image generation and its translation to HTTP responses.

Every failure of a generation request ends as one of the exceptions below and is
rendered as a JSON body of the form {"error": <message>, ...extra}.
"""
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from replicate.exceptions import ReplicateError


class ImageGenerationError(Exception):
    """Base class for failures that terminate a generation request."""

    status_code: int = 500
    default_message: str = "Image generation failed"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(ImageGenerationError):
    status_code = 400
    default_message = "Invalid request"


class UpstreamError(ImageGenerationError):
    status_code = 502
    default_message = "Image model request failed"


class ServiceUnavailableError(ImageGenerationError):
    status_code = 503
    default_message = "AI service unavailable"


class AuthError(ImageGenerationError):
    status_code = 401
    default_message = "Invalid API key"


class GenerationTimeoutError(ImageGenerationError):
    status_code = 504
    default_message = "Image generation timed out"


class GenericFailure(ImageGenerationError):
    status_code = 500
    default_message = "Image generation failed"


def _is_auth_failure(exc: Exception, message: str) -> bool:
    if "401" in message:
        return True
    return isinstance(exc, ReplicateError) and getattr(exc, "status", None) == 401


def _is_connection_refused(exc: Exception, message: str) -> bool:
    return "ECONNREFUSED" in message or isinstance(exc, httpx.ConnectError)


def _is_timeout(exc: Exception, message: str) -> bool:
    return "timeout" in message or isinstance(exc, httpx.TimeoutException)


def classify_error(exc: Exception) -> ImageGenerationError:
    """
    Translate an arbitrary exception raised during generation into a domain error.

    The remote API offers no stable error contract, so classification combines
    typed checks with substring matches on the message. When several rules match,
    the first one below wins:

        1. "401" / Replicate 401       -> AuthError (401)
        2. "ECONNREFUSED" / ConnectError -> ServiceUnavailableError (503)
        3. "timeout" / TimeoutException  -> GenerationTimeoutError (504)
        4. anything else               -> GenericFailure (500)

    Args:
        exc: The exception caught at the request boundary

    Returns:
        The matching ImageGenerationError; domain errors are returned unchanged
    """
    if isinstance(exc, ImageGenerationError):
        return exc

    message = str(exc)
    if _is_auth_failure(exc, message):
        return AuthError()
    if _is_connection_refused(exc, message):
        return ServiceUnavailableError()
    if _is_timeout(exc, message):
        return GenerationTimeoutError()
    return GenericFailure()


async def image_generation_error_handler(request: Request, exc: ImageGenerationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError("Invalid request")
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ImageGenerationError, image_generation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
