# utils/__init__.py

from .exceptions import (
    CLIError,
    EmptyResponseError,
    ImageBuilderApiError,
    ImageBuilderOpsError,
    ResourceNotFoundError,
    ResourceValidationError,
    SessionError,
    UnexpectedStateError,
    ValidationRules,
    WaiterTimeoutError,
)
from .logger import setup_logger
from .config import ConfigManager
from .session import SessionManager, assume_role

__all__ = [
    "ConfigManager",
    "SessionManager",
    "assume_role",
    "setup_logger",
    "CLIError",
    "EmptyResponseError",
    "ImageBuilderApiError",
    "ImageBuilderOpsError",
    "ResourceNotFoundError",
    "ResourceValidationError",
    "SessionError",
    "UnexpectedStateError",
    "ValidationRules",
    "WaiterTimeoutError",
]
