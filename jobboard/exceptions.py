"""
Custom exceptions for the job board backend
Each error type maps to one HTTP status code
"""

from typing import Optional, Dict, Any


class JobBoardError(Exception):
    """Base exception for all job board errors"""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ValidationError(JobBoardError):
    """Raised when request input is missing, empty or malformed"""
    pass


class InvalidSection(ValidationError):
    """Raised when a section is neither 'Post' nor 'Apply'"""
    pass


class EmptyFile(ValidationError):
    """Raised when an uploaded resume has no content"""
    pass


class UnsupportedMediaType(JobBoardError):
    """Raised when an uploaded resume is not a PDF"""
    pass


class InvalidCredentials(JobBoardError):
    """Raised when a username/password pair does not match"""
    pass


class TokenExpired(JobBoardError):
    pass


class TokenInvalid(JobBoardError):
    pass


class NotAuthorized(JobBoardError):
    """Raised when an account's section does not allow the operation"""
    pass


class PosterNotFound(JobBoardError):
    pass


class UserNotFound(JobBoardError):
    pass


class ResumeNotFound(JobBoardError):
    pass


class UsernameTaken(JobBoardError):
    pass


class BlobStoreError(JobBoardError):
    """Raised when the resume blob store fails"""
    pass


class BlobNotFound(BlobStoreError):
    pass


class PersistenceError(JobBoardError):
    """Raised when a database write fails and was rolled back"""
    pass


# Error mapping for HTTP status codes
ERROR_STATUS_MAPPING = {
    ValidationError: 400,
    InvalidSection: 400,
    EmptyFile: 400,
    UnsupportedMediaType: 415,
    InvalidCredentials: 401,
    TokenExpired: 401,
    TokenInvalid: 401,
    NotAuthorized: 403,
    PosterNotFound: 403,
    UserNotFound: 404,
    ResumeNotFound: 404,
    BlobNotFound: 404,
    UsernameTaken: 409,
    BlobStoreError: 500,
    PersistenceError: 500,
}


def get_http_status_code(exception: JobBoardError) -> int:
    """Get HTTP status code for an exception"""
    return ERROR_STATUS_MAPPING.get(type(exception), 500)


def create_error_response(exception: JobBoardError) -> Dict[str, Any]:
    """Create a standardized error response"""
    return {
        "message": exception.message,
        "error": {
            "code": exception.error_code,
            "type": type(exception).__name__,
            "details": exception.details,
        }
    }
