"""
Configuration loader from environment variables and .env files.
"""

import os
from typing import Optional

from pydantic import ValidationError

from ..config import (
    ClientConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    TimeoutConfig,
)
from ..exceptions import ConfigurationError
from ..impersonation import ImpersonationConfig
from ..logging.config import LoggingConfig
from .validator import ClientSettings

PROFILE_ENV_VAR = "REQUEST_SHAPER_ENV"


def get_env_file_path(profile: Optional[str] = None) -> str:
    """
    Get .env file path for profile.

    Examples:
        >>> get_env_file_path("production")
        '.env.production'
        >>> get_env_file_path(None)  # REQUEST_SHAPER_ENV not set
        '.env'
    """
    if profile is None:
        profile = os.getenv(PROFILE_ENV_VAR)
    if not profile:
        return ".env"
    return f".env.{profile}"


def load_from_env(
    env_file: Optional[str] = None,
    profile: Optional[str] = None,
    **overrides
) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit settings fields
    2. Environment variables (REQUEST_SHAPER_*)
    3. .env file (profile-specific or default)
    4. Defaults

    Args:
        env_file: Custom .env file path (overrides profile)
        profile: Profile name, selects ``.env.<profile>``
        **overrides: ClientSettings field overrides

    Returns:
        ClientConfig instance

    Raises:
        ConfigurationError: If settings fail validation

    Example:
        >>> config = load_from_env(impersonate_user="alice")
    """
    if env_file is None:
        env_file = get_env_file_path(profile)

    try:
        settings = ClientSettings(_env_file=env_file, **overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid environment configuration: {e}") from e

    verify = settings.security_ca_file or settings.security_verify_ssl

    impersonate = None
    if settings.has_impersonation():
        impersonate = ImpersonationConfig(
            username=settings.impersonate_user or "",
            uid=settings.impersonate_uid or "",
            groups=settings.group_list(),
            extra=settings.extra_map(),
        )

    logging_config = None
    if settings.log_enabled:
        logging_config = LoggingConfig.create(
            level=settings.log_level,
            format=settings.log_format,
            file_path=settings.log_file_path,
            log_headers=settings.log_headers,
            log_modifiers=settings.log_modifiers,
        )

    return ClientConfig(
        base_url=settings.base_url or None,
        user_agent=settings.user_agent,
        timeout=TimeoutConfig(connect=settings.timeout_connect, read=settings.timeout_read),
        pool=ConnectionPoolConfig(
            pool_connections=settings.pool_connections,
            pool_maxsize=settings.pool_maxsize,
        ),
        security=SecurityConfig(
            verify_ssl=verify,
            max_response_size=settings.security_max_response_size,
        ),
        impersonate=impersonate,
        logging=logging_config,
    )
