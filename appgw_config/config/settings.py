"""
Configuration settings for the load distribution policy builder.

Loads configuration from environment variables with sensible defaults.
"""

import os
import re
from typing import Optional

from .constants import (
    DEFAULT_KUBERNETES_API_SERVER,
    SERVICE_ACCOUNT_CA_CERT_PATH,
    SERVICE_ACCOUNT_TOKEN_PATH,
)

# Application Gateway property names share this prefix budget
CONFIG_NAME_PREFIX_PATTERN = r'^[-_.a-zA-Z0-9]{0,50}$'


class Settings:
    """
    Configuration settings for gateway identifiers, the Kubernetes API
    connection and policy fetch retries.

    All settings are loaded from environment variables with defaults.
    """

    def __init__(self):
        """Initialize settings from environment variables."""
        # Application Gateway identity
        self.subscription_id: str = os.getenv('APPGW_SUBSCRIPTION_ID', '')
        self.resource_group: str = os.getenv('APPGW_RESOURCE_GROUP', '')
        self.app_gw_name: str = os.getenv('APPGW_NAME', '')
        self.config_name_prefix: str = os.getenv('APPGW_CONFIG_NAME_PREFIX', '')

        # Kubernetes API
        self.kubernetes_api_server: str = self._resolve_api_server()
        self.kubernetes_token_path: str = os.getenv(
            'KUBERNETES_TOKEN_PATH', SERVICE_ACCOUNT_TOKEN_PATH
        )
        self.kubernetes_ca_cert_path: str = os.getenv(
            'KUBERNETES_CA_CERT_PATH', SERVICE_ACCOUNT_CA_CERT_PATH
        )
        self.kubernetes_request_timeout: float = float(
            os.getenv('KUBERNETES_REQUEST_TIMEOUT', '10.0')
        )

        # Retry Configuration
        self.max_retries: int = int(os.getenv('MAX_RETRIES', '3'))
        self.retry_base_delay: float = float(os.getenv('RETRY_BASE_DELAY', '0.1'))
        self.retry_max_delay: float = float(os.getenv('RETRY_MAX_DELAY', '2.0'))

        # Logging Configuration
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')

        # Validate configuration
        self._validate()

    def _resolve_api_server(self) -> str:
        """
        Resolve the Kubernetes API server URL.

        An explicit KUBERNETES_API_SERVER wins; otherwise the in-cluster
        service environment is used.

        Returns:
            API server base URL without trailing slash
        """
        explicit = os.getenv('KUBERNETES_API_SERVER')
        if explicit:
            return explicit.rstrip('/')

        host = os.getenv('KUBERNETES_SERVICE_HOST')
        port = os.getenv('KUBERNETES_SERVICE_PORT', '443')
        if host:
            if ':' in host:
                host = f'[{host}]'
            return f'https://{host}:{port}'

        return DEFAULT_KUBERNETES_API_SERVER

    def _validate(self):
        """Validate configuration values."""
        if not re.match(CONFIG_NAME_PREFIX_PATTERN, self.config_name_prefix):
            raise ValueError(
                f"Invalid APPGW_CONFIG_NAME_PREFIX: {self.config_name_prefix!r}. "
                f"Must match {CONFIG_NAME_PREFIX_PATTERN}"
            )

        if self.kubernetes_request_timeout <= 0:
            raise ValueError(
                "KUBERNETES_REQUEST_TIMEOUT must be positive, "
                f"got {self.kubernetes_request_timeout}"
            )

        # Validate retry configuration
        if self.max_retries < 0:
            raise ValueError(f"MAX_RETRIES must be non-negative, got {self.max_retries}")

        if self.retry_base_delay <= 0:
            raise ValueError(
                f"RETRY_BASE_DELAY must be positive, got {self.retry_base_delay}"
            )

        if self.retry_max_delay <= 0:
            raise ValueError(
                f"RETRY_MAX_DELAY must be positive, got {self.retry_max_delay}"
            )

        # Validate log level
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.log_level.upper() not in valid_log_levels:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.log_level}. "
                f"Must be one of {valid_log_levels}"
            )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
