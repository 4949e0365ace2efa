"""Core модули request-shaper."""

from .headers import (
    IMPERSONATE_GROUP_HEADER,
    IMPERSONATE_UID_HEADER,
    IMPERSONATE_USER_EXTRA_HEADER_PREFIX,
    IMPERSONATE_USER_HEADER,
    extra_header_name,
    sanitize_header_key,
)
from .request import APIRequest, ModifiableRequest
from .warning_handler import (
    LoggingWarningHandler,
    NoWarnings,
    WarningHandler,
    WarningHeader,
    WarningWriter,
    parse_warning_headers,
)
from .impersonation import ImpersonationConfig
from .modifiers import (
    Impersonate,
    RequestModifier,
    SetHeader,
    SetWarningHandler,
    apply_modifiers,
)
from .options import (
    CreateOptions,
    DeleteOptions,
    GetOptions,
    ListOptions,
    Options,
    PatchOptions,
    UpdateOptions,
)
from .config import (
    ClientConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    TimeoutConfig,
)
from .exceptions import (
    APIClientException,
    BadRequestError,
    ConfigurationError,
    ConflictError,
    ConnectionError,
    ForbiddenError,
    HTTPError,
    InvalidRequestError,
    InvalidResponseError,
    InvalidWarningHeaderError,
    NetworkError,
    NotFoundError,
    ResponseTooLargeError,
    ServerError,
    TimeoutError,
    UnauthorizedError,
    classify_requests_exception,
)
from .http_client import APIClient, PatchType

__all__ = [
    # Headers
    "IMPERSONATE_USER_HEADER",
    "IMPERSONATE_UID_HEADER",
    "IMPERSONATE_GROUP_HEADER",
    "IMPERSONATE_USER_EXTRA_HEADER_PREFIX",
    "sanitize_header_key",
    "extra_header_name",
    # Request
    "APIRequest",
    "ModifiableRequest",
    # Warnings
    "WarningHandler",
    "WarningHeader",
    "LoggingWarningHandler",
    "NoWarnings",
    "WarningWriter",
    "parse_warning_headers",
    # Modifiers
    "ImpersonationConfig",
    "RequestModifier",
    "SetWarningHandler",
    "SetHeader",
    "Impersonate",
    "apply_modifiers",
    # Options
    "Options",
    "GetOptions",
    "ListOptions",
    "CreateOptions",
    "UpdateOptions",
    "DeleteOptions",
    "PatchOptions",
    # Config
    "ClientConfig",
    "TimeoutConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    # Client
    "APIClient",
    "PatchType",
    # Exceptions
    "APIClientException",
    "NetworkError",
    "TimeoutError",
    "ConnectionError",
    "HTTPError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
    "InvalidRequestError",
    "InvalidResponseError",
    "ResponseTooLargeError",
    "InvalidWarningHeaderError",
    "ConfigurationError",
    "classify_requests_exception",
]
