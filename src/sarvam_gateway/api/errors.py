"""
App-level exception handlers.

Every error leaves the gateway as JSON with ``success: false``; clients
never see a framework default body or a stack trace.

    GatewayError            -> its own status and to_dict() body
    HTTP 404/405 (routing)  -> 404 "Route <METHOD> <path> not found"
    other HTTPException     -> its status, detail as message
    RequestValidationError  -> 400 (malformed JSON or form data)
    any other Exception     -> exc.status_code if present, else 500
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sarvam_gateway.core.logging import error, get_logger, verbose
from sarvam_gateway.services.errors import ErrorCode, GatewayError

_LOG = get_logger("sarvam-gateway.api")


def _request_target(request: Request) -> str:
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"
    return url


def route_not_found(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "success": False,
            "message": f"Route {request.method} {_request_target(request)} not found",
        },
    )


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        error(_LOG, "request_failed", code=exc.code, status=exc.status_code, error=exc.error)
    else:
        verbose(_LOG, "request_rejected", code=exc.code, status=exc.status_code, reason=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # A known path with the wrong method is reported as an unknown route
    if exc.status_code in (404, 405):
        return route_not_found(request)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Invalid request",
            "code": ErrorCode.INVALID_INPUT,
            "error": details,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    status = getattr(exc, "status_code", None)
    if not isinstance(status, int) or not 400 <= status <= 599:
        status = 500
    error(_LOG, "unhandled_error", error=str(exc), error_type=type(exc).__name__,
          path=request.url.path, exc_info=exc)
    # Runs outside the request-ID middleware, so the header is set here
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=status,
        content={"success": False, "message": str(exc) or "Internal Server Error"},
        headers={"X-Request-Id": request_id} if request_id else None,
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register all gateway exception handlers on an application."""
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
