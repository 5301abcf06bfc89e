import logging
from fastapi.exceptions import RequestValidationError
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for errors reported to API callers with a stable kind."""

    kind = "DomainError"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or out-of-range input (negative days, unknown project ids...)."""

    kind = "ValidationError"
    status_code = 400


class NotFound(DomainError):
    kind = "NotFound"
    status_code = 404


class StorageFailure(DomainError):
    """The database is unreachable or rejected the operation."""

    kind = "StorageFailure"
    status_code = 503


def error_body(message, kind: str) -> dict:
    return {"error": message, "kind": kind}


def register_exception_handlers(app):
    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        if isinstance(exc, StorageFailure):
            logger.error("Storage failure", extra={"path": request.url.path, "error": exc.message})
        else:
            logger.info("Domain error", extra={"kind": exc.kind, "path": request.url.path})
        return JSONResponse(error_body(exc.message, exc.kind), status_code=exc.status_code)

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Storage error", extra={"path": request.url.path, "error": str(exc)})
        return JSONResponse(error_body("Storage unavailable", StorageFailure.kind), status_code=StorageFailure.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.info("HTTP exception", extra={"status_code": exc.status_code})
        kind = "NotFound" if exc.status_code == 404 else "HTTPError"
        return JSONResponse(error_body(exc.detail, kind), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error", extra={"errors": exc.errors()})
        body = error_body("Validation error", ValidationError.kind)
        body["details"] = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(body, status_code=422)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse(error_body("Internal server error", "InternalError"), status_code=500)
