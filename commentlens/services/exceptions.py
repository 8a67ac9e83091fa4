"""
Service Exceptions
Error hierarchy shared by gateways, services and the HTTP layer
"""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for every error raised by the service layer"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(ServiceError):
    """Bad or missing input, detected before any network call"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class BusinessRuleViolationError(ServiceError):
    """Request is well formed but a business rule rejects it"""


class InsufficientCreditsError(BusinessRuleViolationError):
    def __init__(self, uid: str, credits: int = 0):
        super().__init__(
            "Not enough credits to perform analysis",
            {"uid": uid, "credits": credits},
        )
        self.uid = uid
        self.credits = credits


# ============================================================================
# Resource Errors
# ============================================================================


class ResourceNotFoundError(ServiceError):
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            {"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class VideoNotFoundError(ResourceNotFoundError):
    """The video API returned an empty item list"""

    def __init__(self, video_id: str):
        super().__init__("Video", video_id)


# ============================================================================
# External Service Errors
# ============================================================================


class ExternalServiceError(ServiceError):
    """Failure talking to a third-party API"""

    def __init__(
        self,
        message: str,
        service: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        merged = {"service": service, "status_code": status_code}
        merged.update(details or {})
        super().__init__(message, merged)
        self.service = service
        self.status_code = status_code


class TransportError(ExternalServiceError):
    """Non-2xx status or network failure"""


class GenerationFailedError(ExternalServiceError):
    """Generative API returned a failure status or an unusable body"""

    def __init__(self, reason: Any, status_code: Optional[int] = None):
        if isinstance(reason, int):
            status_code = reason
            message = f"API call failed with status: {reason}"
        else:
            message = str(reason)
        super().__init__(message, service="gemini", status_code=status_code)
        self.reason = reason


# ============================================================================
# Persistence Errors
# ============================================================================


class PersistenceError(ServiceError):
    """Document store read or write failure"""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        message = f"Persistence operation failed: {operation}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message, {"operation": operation})
        self.operation = operation


# ============================================================================
# Utility Functions
# ============================================================================


def error_to_http_status(error: ServiceError) -> int:
    """Map a service error onto an HTTP status code"""
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, InsufficientCreditsError):
        return 402
    if isinstance(error, BusinessRuleViolationError):
        return 409
    if isinstance(error, ResourceNotFoundError):
        return 404
    if isinstance(error, ExternalServiceError):
        return 502
    return 500
