from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from journal.core.validation import InvalidInputError


def error_response(
    *,
    status_code: int,
    code: str,
    detail: str,
    context: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Return a consistent error payload for API responses."""
    payload: Dict[str, Any] = {"error": code, "detail": detail}
    if context:
        payload["context"] = context
    return JSONResponse(status_code=status_code, content=payload)


def validation_error_response(exc: ValueError) -> JSONResponse:
    context = None
    if isinstance(exc, InvalidInputError):
        context = {"field": exc.field, "reason": exc.reason}
    return error_response(status_code=400, code="validation_error", detail=str(exc), context=context)


def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": ".".join(str(part) for part in err.get("loc", ()) if part != "body"), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    detail = "; ".join(f"{e['loc']}: {e['msg']}" if e["loc"] else e["msg"] for e in errors) or "Invalid request"
    return error_response(status_code=400, code="validation_error", detail=detail, context={"errors": errors})


def install_error_handlers(app: FastAPI) -> None:
    """Report request-schema failures with the same 400 payload the calculators use."""
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
