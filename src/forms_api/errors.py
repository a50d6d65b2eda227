"""Request errors and their HTTP mapping.

Handlers raise these exceptions; ``register_error_handlers`` turns them
into responses. Anything else propagates to Starlette's default 500.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response

from forms_api.config import Settings
from forms_api.headers import create_failure_alert

logger = structlog.get_logger()

PROBLEM_WITH_MESSAGE_TYPE = "https://www.jhipster.tech/problem/problem-with-message"
PROBLEM_CONTENT_TYPE = "application/problem+json"


class InvalidRequestError(Exception):
    """Raised when a request violates an identifier precondition."""

    def __init__(self, message: str, entity_name: str, error_key: str) -> None:
        """Initialize invalid request error.

        Args:
            message: Human-readable description, used as the problem title.
            entity_name: Entity the request targeted.
            error_key: Machine-readable reason code (e.g., idexists, idnull).
        """
        super().__init__(message)
        self.message = message
        self.entity_name = entity_name
        self.error_key = error_key


class FormNotFoundError(Exception):
    """Raised when a requested insurance form does not exist."""

    def __init__(self, form_id: int) -> None:
        super().__init__(f"Insurance form {form_id} not found")
        self.form_id = form_id


async def handle_invalid_request(
    request: Request, exc: InvalidRequestError
) -> JSONResponse:
    """Render an InvalidRequestError as a 400 problem document.

    Args:
        request: Request that failed.
        exc: The raised InvalidRequestError.

    Returns:
        Problem JSON response with failure alert headers.
    """
    settings: Settings = request.app.state.settings

    logger.warning(
        "invalid_request",
        path=request.url.path,
        entity=exc.entity_name,
        error_key=exc.error_key,
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "type": PROBLEM_WITH_MESSAGE_TYPE,
            "title": exc.message,
            "status": status.HTTP_400_BAD_REQUEST,
            "entityName": exc.entity_name,
            "errorKey": exc.error_key,
            "message": f"error.{exc.error_key}",
            "params": exc.entity_name,
        },
        headers=create_failure_alert(
            settings.application_name,
            settings.enable_translation,
            exc.entity_name,
            exc.error_key,
            exc.message,
        ),
        media_type=PROBLEM_CONTENT_TYPE,
    )


async def handle_not_found(request: Request, exc: FormNotFoundError) -> Response:
    """Render a FormNotFoundError as an empty 404."""
    return Response(status_code=status.HTTP_404_NOT_FOUND)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the request error handlers to ``app``.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(InvalidRequestError, handle_invalid_request)
    app.add_exception_handler(FormNotFoundError, handle_not_found)
