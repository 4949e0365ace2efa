"""request-shaper - цепочка модификаторов запроса перед HTTP API клиентом."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.headers import (
    IMPERSONATE_GROUP_HEADER,
    IMPERSONATE_UID_HEADER,
    IMPERSONATE_USER_EXTRA_HEADER_PREFIX,
    IMPERSONATE_USER_HEADER,
    sanitize_header_key,
)
from .core.request import APIRequest, ModifiableRequest
from .core.warning_handler import (
    LoggingWarningHandler,
    NoWarnings,
    WarningHandler,
    WarningWriter,
)
from .core.impersonation import ImpersonationConfig
from .core.modifiers import (
    Impersonate,
    RequestModifier,
    SetHeader,
    SetWarningHandler,
    apply_modifiers,
)
from .core.options import (
    CreateOptions,
    DeleteOptions,
    GetOptions,
    ListOptions,
    Options,
    PatchOptions,
    UpdateOptions,
)
from .core.config import ClientConfig, TimeoutConfig, ConnectionPoolConfig, SecurityConfig
from .core.http_client import APIClient, PatchType
from .core.logging import LoggingConfig
from .core.exceptions import (
    APIClientException,
    NetworkError,
    TimeoutError,
    ConnectionError,
    HTTPError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ServerError,
    InvalidRequestError,
    InvalidResponseError,
    ResponseTooLargeError,
    ConfigurationError,
)

# Users can configure logging themselves using logging.getLogger('request_shaper')
logging.getLogger('request_shaper').addHandler(logging.NullHandler())

try:
    __version__ = version("request-shaper")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Headers
    "IMPERSONATE_USER_HEADER",
    "IMPERSONATE_UID_HEADER",
    "IMPERSONATE_GROUP_HEADER",
    "IMPERSONATE_USER_EXTRA_HEADER_PREFIX",
    "sanitize_header_key",
    # Pipeline
    "APIRequest",
    "ModifiableRequest",
    "RequestModifier",
    "SetWarningHandler",
    "SetHeader",
    "Impersonate",
    "ImpersonationConfig",
    "apply_modifiers",
    # Warnings
    "WarningHandler",
    "LoggingWarningHandler",
    "NoWarnings",
    "WarningWriter",
    # Options
    "Options",
    "GetOptions",
    "ListOptions",
    "CreateOptions",
    "UpdateOptions",
    "DeleteOptions",
    "PatchOptions",
    # Client
    "APIClient",
    "PatchType",
    "ClientConfig",
    "TimeoutConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    "LoggingConfig",
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
    "ConfigurationError",
    # Version
    "__version__",
]
