from typing import Dict, Any, Tuple

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from jobboard.exceptions import JobBoardError, get_http_status_code, create_error_response
from jobboard.simple_logger import get_logger

logger = get_logger("errors")


def register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers for the Flask application"""

    @app.errorhandler(JobBoardError)
    def handle_jobboard_error(error: JobBoardError) -> Tuple[Dict[str, Any], int]:
        status_code = get_http_status_code(error)
        if status_code >= 500:
            logger.error(f"{error.error_code} on {request.method} {request.path}: {error.message}", extra={
                'error_code': error.error_code,
                'details': error.details
            })
        else:
            logger.info(f"{error.error_code} on {request.method} {request.path}: {error.message}")
        return create_error_response(error), status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException) -> Tuple[Dict[str, Any], int]:
        logger.warning(f"HTTP {err.code} on {request.method} {request.path}: {err.description}")
        return _error_response(err.code or 500, err.name.lower().replace(' ', '_'), err.description)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception) -> Tuple[Dict[str, Any], int]:
        logger.exception(f"Unexpected error on {request.method} {request.path}: {err}")
        return _error_response(500, "unexpected_error", "An unexpected error occurred")


def _error_response(status: int, code: str, message: str) -> Tuple[Dict[str, Any], int]:
    trace_id = request.headers.get("X-Request-ID")
    response = {
        "message": message,
        "error": {
            "code": code,
            "status": status
        }
    }

    if trace_id:
        response["error"]["trace_id"] = trace_id

    return response, status
