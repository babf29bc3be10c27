import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from bowlscan.services.vision import RecognizerPayloadError

logger = logging.getLogger("bowlscan.errors")

def register_error_handlers(app: FastAPI):
    @app.exception_handler(HTTPException)
    async def http_exc_handler(request: Request, exc: HTTPException):
        logger.warning(
            "HTTPException path=%s status=%s detail=%r",
            request.url.path, exc.status_code, exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail) if exc.detail else "HTTP error"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "ValidationError path=%s errors=%s",
            request.url.path, exc.errors()
        )
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "details": jsonable_errors(exc)},
        )

    # recognizer JSON that is valid JSON but not a Vision response
    @app.exception_handler(RecognizerPayloadError)
    async def payload_exc_handler(request: Request, exc: RecognizerPayloadError):
        logger.warning("RecognizerPayloadError path=%s msg=%s", request.url.path, exc)
        return JSONResponse(
            status_code=422,
            content={"error": f"bad recognizer payload: {exc}"},
        )

    @app.exception_handler(Exception)
    async def unhandled_exc_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error at path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic may put the offending exception object under "ctx"
    out = []
    for e in exc.errors():
        e = dict(e)
        if "ctx" in e:
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        out.append(e)
    return out
