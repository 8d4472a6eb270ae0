import logging
from datetime import datetime
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_error_key, get_error_message
from services.errors import DomainError, ErrorKind
from utils.templating import render_template

logger = logging.getLogger(__name__)

# Correspondance entre les erreurs métier et les statuts HTTP
STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_NAME: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_VALUE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ALREADY_ASSOCIATED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_ASSOCIATED: status.HTTP_400_BAD_REQUEST,
}

def wants_json(request: Request) -> bool:
    """La réponse est en JSON pour l'API ou si le client le demande explicitement."""
    accept = request.headers.get("accept", "")
    return request.url.path.startswith("/api/") or "application/json" in accept

def error_body(status_code: int, message: str, path: str, **extra) -> dict:
    body = {
        "timestamp": datetime.now().isoformat(),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
        "path": path,
    }
    body.update(extra)
    return body

def error_page(request: Request, status_code: int, message: str):
    return render_template(request, "error.html", {"code": status_code, "error_message": message},
                           status_code=status_code)

async def domain_error_handler(request: Request, exc: DomainError):
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    logger.info(f"{request.method} {request.url.path} -> {status_code} ({exc.kind.value}) {exc.detail}")
    if wants_json(request):
        return JSONResponse(
            status_code=status_code,
            content=error_body(status_code, exc.detail, request.url.path, kind=exc.kind.value, code=exc.code),
        )
    return error_page(request, status_code, exc.detail)

async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = get_error_message(get_error_key("request", "validation"))
    if wants_json(request):
        errors = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            errors[field or "body"] = error.get("msg", "")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=jsonable_encoder(error_body(status.HTTP_400_BAD_REQUEST, message, request.url.path,
                                                kind="validation", errors=errors)),
        )
    return error_page(request, status.HTTP_400_BAD_REQUEST, message)

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Redirections (connexion requise) et réponses JSON : comportement standard de FastAPI
    if wants_json(request) or "location" in {k.lower() for k in (exc.headers or {})}:
        return await http_exception_handler(request, exc)
    return error_page(request, exc.status_code, str(exc.detail))

async def unexpected_error_handler(request: Request, exc: Exception):
    # Le détail de l'erreur reste dans les logs, jamais dans la réponse
    logger.error(f"Erreur inattendue sur {request.method} {request.url.path} : {exc}", exc_info=exc)
    message = get_error_message(get_error_key("server", "internal"))
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if wants_json(request):
        return JSONResponse(status_code=status_code, content=error_body(status_code, message, request.url.path))
    return error_page(request, status_code, message)

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
