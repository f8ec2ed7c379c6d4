"""
Translation endpoint.

POST runs the provider fallback chain; OPTIONS answers CORS preflight.
"""

import logging
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from transproxy.api.deps import get_coordinator
from transproxy.services.translation.base import TranslationRequest
from transproxy.services.translation.coordinator import TranslationCoordinator
from transproxy.services.translation.errors import (
    AllProvidersExhausted,
    InvalidRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class TranslateBody(BaseModel):
    """Inbound translation request body."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | list[str] | None = None
    source_lang: str | None = Field(default=None, alias="sourceLang")
    target_lang: str | None = Field(default=None, alias="targetLang")
    api_key: str | None = Field(default=None, alias="apiKey")


class TranslateResponse(BaseModel):
    """Successful translation response."""

    model_config = ConfigDict(populate_by_name=True)

    translated_text: str | list[str] = Field(alias="translatedText")
    service: str
    success: bool = True
    partial: bool = False


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


@router.options("")
async def translate_preflight() -> Response:
    """CORS preflight."""
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("")
async def translate(
    request: Request,
    coordinator: TranslationCoordinator = Depends(get_coordinator),
) -> JSONResponse:
    """
    Translate a text or a batch of texts.

    Tries each configured provider in order and reports which one answered.
    """
    try:
        body = TranslateBody.model_validate(await request.json())
        translation_request = TranslationRequest(
            text=body.text,
            target_lang=body.target_lang,
            source_lang=body.source_lang,
            credentials=body.api_key,
        )
        translation_request.validate()
    # ValueError covers malformed JSON, non-UTF-8 bodies and ValidationError
    except (ValueError, InvalidRequest) as e:
        logger.info(f"Rejected translation request: {e}")
        return _json(400, {"error": "Missing required fields: text, targetLang"})

    try:
        result = await coordinator.translate(translation_request)
    except AllProvidersExhausted as e:
        logger.error(f"Translation failed: {e.last_error}")
        return _json(
            500,
            {"error": e.user_message, "service": "none", "success": False},
        )

    response = TranslateResponse(
        translated_text=result.translated_text,
        service=result.service,
        success=result.success,
        partial=result.partial,
    )
    return _json(200, response.model_dump(by_alias=True))


@router.api_route(
    "",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"],
    include_in_schema=False,
)
async def translate_method_not_allowed() -> JSONResponse:
    return _json(405, {"error": "Method not allowed"})
