"""
Exception handlers for FastAPI applications using formula-commons.

Maps every FormulaCommonsError to its HTTP status through
get_http_status_code and renders it with create_error_response.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.exceptions import FormulaCommonsError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register formula-commons exception handlers for the application.

    Must be called by any service using the permission dependencies, which
    raise PermissionDeniedError on a denied decision.

    Args:
        app: FastAPI application instance
    """
    @app.exception_handler(FormulaCommonsError)
    async def formula_commons_exception_handler(request: Request, exc: FormulaCommonsError):
        """Handle formula-commons exceptions."""
        status_code = get_http_status_code(exc)
        if status_code >= 500:
            logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content=create_error_response(exc),
        )
