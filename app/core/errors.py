from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(StarletteHTTPException):
    """HTTP error with a fixed status and the JSON key its detail is rendered under."""

    default_status = 400
    body_key = "message"

    def __init__(self, detail: str, *, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.default_status, detail=detail, headers=headers)


class NotFoundError(ApiError):
    default_status = 404


class ConflictError(ApiError):
    default_status = 400


class UnauthorizedError(ApiError):
    default_status = 401

    def __init__(self, detail: str = "Unauthenticated", *, headers: dict[str, str] | None = None) -> None:
        super().__init__(detail, headers=headers or {"WWW-Authenticate": "Bearer"})


class ForbiddenError(ApiError):
    # Role mismatches answer 401, matching the unauthenticated case.
    default_status = 401


class CredentialsError(UnauthorizedError):
    body_key = "error"


class RegistrationError(ApiError):
    body_key = "error"


class FieldValidationError(ApiError):
    default_status = 422

    def __init__(self, errors: dict[str, list[str]], detail: str = "Validation error") -> None:
        super().__init__(detail)
        self.errors = errors


def validation_error_map(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in (err.get("loc") or ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:] or loc
        field = ".".join(loc) or "__root__"
        out.setdefault(field, []).append(str(err.get("msg") or "Invalid value"))
    return out


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> ORJSONResponse:
    key = getattr(exc, "body_key", "message")
    content: dict[str, Any] = {key: exc.detail}
    if isinstance(exc, FieldValidationError):
        content["errors"] = exc.errors
    return ORJSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=422,
        content={"message": "Validation error", "errors": validation_error_map(list(exc.errors()))},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
