"""
Environment configuration for APIClient.

Example:
    >>> from request_shaper.core.env_config import load_from_env
    >>> config = load_from_env(profile="production")
    >>> client = APIClient(config=config)
"""

from .loader import load_from_env, get_env_file_path
from .validator import ClientSettings

__all__ = [
    "load_from_env",
    "get_env_file_path",
    "ClientSettings",
]
