from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.logger import logger
from fastapi.responses import JSONResponse


class InvoicingError(Exception):
    """Base error for invoicing operations, rendered as a `{message}` response"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(InvoicingError):
    """Raised when a referenced invoice or timesheet does not exist"""
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(InvoicingError):
    """Raised when a timesheet cannot be invoiced in its current state"""
    status_code = status.HTTP_409_CONFLICT


class DuplicateInvoiceError(InvoicingError):
    """Raised when an invoice already exists for a timesheet"""
    status_code = status.HTTP_409_CONFLICT


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    message = str(errors[0].get("msg", "Invalid request"))
    # pydantic prefixes custom validator messages
    return message.removeprefix("Value error, ")


def register_exception_handlers(app: FastAPI) -> None:
    """Answer domain and validation errors with a `{message}` body"""

    @app.exception_handler(InvoicingError)
    async def handle_invoicing_error(request: Request, exc: InvoicingError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"message": _validation_message(exc), "errors": jsonable_errors(exc)},
        )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", [])), "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]
