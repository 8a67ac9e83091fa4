"""
Services Package
Business logic layer for CommentLens
"""

from .exceptions import (
    # Base
    ServiceError,

    # Validation Errors
    ValidationError,
    BusinessRuleViolationError,
    InsufficientCreditsError,

    # Resource Errors
    ResourceNotFoundError,
    VideoNotFoundError,

    # External Service Errors
    ExternalServiceError,
    TransportError,
    GenerationFailedError,

    # Persistence Errors
    PersistenceError,

    # Utility Functions
    error_to_http_status,
)
from .profile_stream import ProfileStream
from .persistence_service import PersistenceService
from .analysis_service import (
    AnalysisOrchestrator,
    AnalysisRun,
    AnalysisRunRegistry,
    AnalysisStep,
    RunStatus,
)

__all__ = [
    # Services
    "ProfileStream",
    "PersistenceService",
    "AnalysisOrchestrator",
    "AnalysisRun",
    "AnalysisRunRegistry",
    "AnalysisStep",
    "RunStatus",

    # Exceptions
    "ServiceError",
    "ValidationError",
    "BusinessRuleViolationError",
    "InsufficientCreditsError",
    "ResourceNotFoundError",
    "VideoNotFoundError",
    "ExternalServiceError",
    "TransportError",
    "GenerationFailedError",
    "PersistenceError",
    "error_to_http_status",
]
