from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from src.api.schemas import ErrorDetail
from src.components.content import ContentValidationError, to_validation_error
from src.domain.errors import ContentEngineError

# Error code -> HTTP status. Anything unlisted is a 400.
STATUS_BY_CODE: dict[str, int] = {
    "not_found": 404,
    "unknown_collection": 404,
    "slug_conflict": 409,
    "order_mismatch": 409,
    "concurrency_conflict": 409,
}


def http_error(errors: list[ContentValidationError]) -> HTTPException:
    """Build the HTTPException for a failed component output."""
    if not errors:
        return HTTPException(status_code=400, detail="Request failed")
    err = errors[0]
    detail = ErrorDetail(
        code=err.code,
        message=err.message,
        field=err.field,
        suggestion=err.suggestion,
    )
    return HTTPException(
        status_code=STATUS_BY_CODE.get(err.code, 400),
        detail=detail.model_dump(exclude_none=True),
    )


def error_response(exc: ContentEngineError) -> JSONResponse:
    """Domain errors that escape a route become the same error body."""
    err = to_validation_error(exc)
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 400),
        content={"detail": ErrorDetail(**asdict(err)).model_dump(exclude_none=True)},
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ContentEngineError)
    async def handle_content_error(request: Request, exc: ContentEngineError) -> JSONResponse:
        return error_response(exc)
