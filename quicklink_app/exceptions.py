"""
Application error hierarchy.

Services raise these; the API layer turns them into JSON error envelopes
(see quicklink_app.api.errors).
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP status code"""
    
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class ValidationError(AppError):
    """Malformed input. Never retried."""
    
    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, 400, "VALIDATION_ERROR")
        self.details = details


class NotFoundError(AppError):
    """Unknown or expired shortcode"""
    
    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found", 404, "NOT_FOUND")


class ConflictError(AppError):
    """Shortcode already taken"""
    
    def __init__(self, message: str):
        super().__init__(message, 409, "CONFLICT")
