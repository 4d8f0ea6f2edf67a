"""FastAPI wiring for quizforge errors.

Needs the ``api`` extra. A host app calls :func:`register_exception_handlers`
once; quiz parse failures then reach clients with their issue list, and
anything unexpected becomes a generic 500 without leaking the message.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from quizforge.core.exceptions import QuizforgeException, QuizGenerationError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuizGenerationError)
    async def _quiz_generation_handler(_request: Request, exc: QuizGenerationError) -> JSONResponse:
        logger.warning("Quiz generation failed (%s) with %d issues", exc.code, len(exc.issues))
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(QuizforgeException)
    async def _quizforge_handler(_request: Request, exc: QuizforgeException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        error = QuizforgeException(
            "Validation error", code="validation_error", status_code=422, details=exc.errors()
        )
        payload = error.to_payload()
        payload["type"] = type(exc).__name__
        return JSONResponse(status_code=422, content=payload)

    @app.exception_handler(Exception)
    async def _unhandled_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "code": "internal_error",
                "type": "InternalServerError",
            },
        )


__all__ = ["register_exception_handlers"]
