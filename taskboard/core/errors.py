"""
Domain exceptions and their FastAPI handlers.

Every error raised by the ordering core derives from TaskBoardError. The
HTTP status and the machine-readable code live on the class, so handlers
never need to inspect the exception type.
"""
import logging
import re
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TaskBoardError(Exception):
    """Internal server error"""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # NotFoundError -> NOT_FOUND
        if "code" not in cls.__dict__:
            name = cls.__name__
            if name.endswith("Error"):
                name = name[: -len("Error")]
            cls.code = re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()

        if "default_message" not in cls.__dict__ and cls.__doc__:
            cls.default_message = cls.__doc__.strip().split("\n")[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TaskBoardError):
    """Invalid request data"""

    status_code = 400


class NotFoundError(TaskBoardError):
    """Task not found"""

    status_code = 404


class StorageError(TaskBoardError):
    """Storage operation failed"""

    status_code = 500


async def task_board_error_handler(request: Request, exc: TaskBoardError) -> JSONResponse:
    """Render a domain error with its own status code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Body/path validation failures are reported as 400, like domain validation."""
    logger.warning(f"{request.method} {request.url.path} -> invalid request: {exc.errors()}")

    error = ValidationError(details={"errors": jsonable_encoder(exc.errors())})
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handlers to the application."""
    app.add_exception_handler(TaskBoardError, task_board_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
