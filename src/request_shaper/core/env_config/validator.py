"""
Pydantic settings for environment configuration.
"""

from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    APIClient configuration from environment variables.

    Reads from:
    1. Environment variables (REQUEST_SHAPER_*)
    2. .env file
    3. Defaults

    Example .env file:
        REQUEST_SHAPER_BASE_URL=https://cluster.example.com:6443
        REQUEST_SHAPER_TIMEOUT_READ=30
        REQUEST_SHAPER_IMPERSONATE_USER=alice
        REQUEST_SHAPER_IMPERSONATE_GROUPS=dev,ops
        REQUEST_SHAPER_IMPERSONATE_EXTRA__SCOPES=view,edit
        REQUEST_SHAPER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix='REQUEST_SHAPER_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
        env_nested_delimiter='__',
    )

    base_url: str = Field(default="", description="API server address")
    user_agent: str = Field(default="request-shaper")

    # Timeouts
    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)

    # Security
    security_verify_ssl: bool = Field(default=True)
    security_ca_file: Optional[str] = Field(default=None, description="CA bundle path, overrides verify_ssl")
    security_max_response_size: int = Field(default=100 * 1024 * 1024, gt=0)

    # Connection pool
    pool_connections: int = Field(default=10, ge=1)
    pool_maxsize: int = Field(default=10, ge=1)

    # Impersonation
    impersonate_user: Optional[str] = None
    impersonate_uid: Optional[str] = None
    impersonate_groups: str = Field(default="", description="Comma-separated group list")
    impersonate_extra: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra attributes, key -> comma-separated values",
    )

    # Logging
    log_enabled: bool = Field(default=False)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_file_path: Optional[str] = None
    log_headers: bool = Field(default=False)
    log_modifiers: bool = Field(default=False)

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base_url scheme."""
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip('/')

    def group_list(self) -> List[str]:
        """Groups from the comma-separated setting, blanks dropped."""
        return [g.strip() for g in self.impersonate_groups.split(',') if g.strip()]

    def extra_map(self) -> Dict[str, List[str]]:
        """
        Extra-атрибуты имперсонации.

        Ключ берётся из имени переменной (``..._IMPERSONATE_EXTRA__SCOPES`` даёт
        ``scopes``) или из JSON (``..._IMPERSONATE_EXTRA='{"example.com/reason": "x"}'``)
        для ключей, которые нельзя записать в имени переменной.
        """
        return {
            key: [v.strip() for v in values.split(',') if v.strip()]
            for key, values in self.impersonate_extra.items()
        }

    def has_impersonation(self) -> bool:
        return (
            self.impersonate_user is not None
            or bool(self.impersonate_uid)
            or bool(self.group_list())
            or bool(self.impersonate_extra)
        )
