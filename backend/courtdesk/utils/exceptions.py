"""
Custom exception classes

Every HTTPException raised by the API is rendered as
``{"success": false, "message": detail}`` by the handlers registered in
``courtdesk.main``.
"""
from fastapi import HTTPException, status


class ValidationFailed(HTTPException):
    """Missing or malformed request fields"""
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationFailed(HTTPException):
    """Missing, invalid or expired bearer token"""
    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDenied(HTTPException):
    """Raised when the caller's role or ownership does not allow the action"""
    def __init__(self, detail: str = "You don't have permission to access this resource"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    """Raised when the requested entity doesn't exist"""
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class CaseNotFoundError(NotFound):
    def __init__(self):
        super().__init__("Case not found")


class HearingNotFoundError(NotFound):
    def __init__(self):
        super().__init__("Hearing not found")


class InternalError(HTTPException):
    """Store unavailable or unexpected failure"""
    def __init__(self, detail: str = "Internal Server Error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
