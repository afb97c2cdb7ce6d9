import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from boxoffice.domain.exceptions import AppError, NotFound, Conflict, Unprocessable, Unauthorized, InvalidInput, \
    Forbidden
from boxoffice.core.ctx import REQUEST_ID_CTX

logger = logging.getLogger("boxoffice.http")

MEDIA_TYPE = "application/problem+json"

_PROBLEMS: dict[type[AppError], tuple[int, str]] = {
    NotFound: (status.HTTP_404_NOT_FOUND, "Not Found"),
    Unauthorized: (status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    Forbidden: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    Conflict: (status.HTTP_409_CONFLICT, "Conflict"),
    InvalidInput: (status.HTTP_400_BAD_REQUEST, "Bad Request"),
    Unprocessable: (status.HTTP_422_UNPROCESSABLE_ENTITY, "Unprocessable Entity"),
    AppError: (status.HTTP_400_BAD_REQUEST, "Application Error"),
}


def _problem_for(exc: AppError) -> tuple[int, str]:
    for cls in type(exc).mro():
        if cls in _PROBLEMS:
            return _PROBLEMS[cls]
    return status.HTTP_400_BAD_REQUEST, "Application Error"


def _www_authenticate_header(error_description: str | None) -> str:
    attributes = ['realm="api"', 'error="invalid_token"']
    if error_description:
        attributes.append(f'error_description="{error_description}"')
    return "Bearer " + ", ".join(attributes)


def problem_response(
        request: Request,
        *,
        http_status: int,
        title: str,
        detail: str | None = None,
        context: dict | None = None,
        headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = {
        "status": http_status,
        "title": title,
        "detail": detail,
        "instance": str(request.url),
    }
    req_id = REQUEST_ID_CTX.get()
    if req_id:
        body["trace_id"] = req_id
    if context:
        body["context"] = context
    return JSONResponse(status_code=http_status, content=body, media_type=MEDIA_TYPE, headers=headers or {})


def register_error_handler(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        status_code, title = _problem_for(exc)
        detail = str(exc) or None
        logger.info("%s %s -> %d %s: %s", request.method, request.url.path, status_code, title, detail)

        headers = None
        if isinstance(exc, Unauthorized):
            headers = {"WWW-Authenticate": _www_authenticate_header(detail)}

        return problem_response(
            request,
            http_status=status_code,
            title=title,
            detail=detail,
            context=exc.ctx or None,
            headers=headers
        )
