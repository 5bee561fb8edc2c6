"""
fensterbrief - HTTP API

Single endpoint that renders a window letter and returns it base64-encoded:

    POST /api/letter { "adresse": "...", "plzOrt": "...", "text": "..." }
"""

import base64
import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from .assets import LogoProvider, logo_provider_for
from .config import LetterSettings, load_settings
from .pdf import build_letter_pdf
from .request import parse_body, request_from_payload

logger = logging.getLogger(__name__)

LETTER_PATH = "/api/letter"
USAGE = f"POST {LETTER_PATH} {{ adresse, plzOrt, text? }}"
METHOD_ERROR = "Use POST with JSON body"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

app = FastAPI(
    title="fensterbrief",
    description="Generates DL/C6 window letters as base64-encoded PDF",
    version="1.0.0",
)


@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    """Attach the permissive CORS headers to every response"""
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(status_code=405, content={"error": METHOD_ERROR},
                            headers=getattr(exc, "headers", None))
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@lru_cache()
def get_settings() -> LetterSettings:
    return load_settings()


def get_logo_provider(settings: LetterSettings = Depends(get_settings)) -> LogoProvider:
    return logo_provider_for(settings.logo)


@app.api_route(LETTER_PATH, methods=["GET", "POST", "OPTIONS"])
async def letter(
    request: Request,
    settings: LetterSettings = Depends(get_settings),
    logo_provider: LogoProvider = Depends(get_logo_provider),
):
    """Health check on GET, preflight on OPTIONS, letter generation on POST"""
    if request.method == "OPTIONS":
        return Response(status_code=200)
    if request.method == "GET":
        return {"ok": True, "usage": USAGE}

    try:
        payload = parse_body(await request.body())
        letter_request = request_from_payload(payload)
        pdf_bytes = await run_in_threadpool(build_letter_pdf, letter_request, settings, logo_provider)
    except Exception as e:
        logger.exception("Letter generation failed")
        return JSONResponse(status_code=500, content={"error": "Internal error", "details": str(e)})

    logger.info("Generated letter for %s, %s (%d bytes)",
                letter_request.address or "<default>", letter_request.locality or "<default>",
                len(pdf_bytes))
    return {
        "fileName": settings.file_name,
        "mimeType": "application/pdf",
        "data": base64.b64encode(pdf_bytes).decode("ascii"),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
