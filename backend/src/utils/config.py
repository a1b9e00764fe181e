"""
Theme Park Wait Times - Configuration Management
Handles environment configuration with AWS SSM Parameter Store for production
and python-dotenv for local development.
"""

import logging
import os
from typing import Optional
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


class Config:
    """
    Configuration manager with dual-mode operation:
    - Local: Reads from .env file via python-dotenv
    - Production: Reads from AWS SSM Parameter Store
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from SSM (production) or environment (local).

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self.environment == 'production':
            return self._get_from_ssm(key, default)
        return os.getenv(key, default)

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration from AWS SSM Parameter Store.

        Raises:
            ConfigurationError: If parameter not found and no default provided,
                               or if AWS credentials/permissions are invalid
        """
        ssm_prefix = os.getenv('AWS_SSM_PREFIX', '/themeparkwaits')
        parameter_name = f"{ssm_prefix}/{key}"

        try:
            if self._ssm_client is None:
                import boto3
                self._ssm_client = boto3.client(
                    'ssm',
                    region_name=os.getenv('AWS_REGION', 'us-east-1')
                )

            response = self._ssm_client.get_parameter(
                Name=parameter_name,
                WithDecryption=True
            )
            return response['Parameter']['Value']

        except Exception as e:
            error_type = type(e).__name__
            if error_type == 'ParameterNotFound':
                if default is not None:
                    return default
                raise ConfigurationError(
                    f"Required parameter '{key}' not found in SSM at path '{parameter_name}'. "
                    f"Please create the parameter or provide a default value."
                )

            if default is not None:
                logging.warning(
                    f"Failed to fetch SSM parameter '{key}': {error_type}: {e}. "
                    f"Using default value."
                )
                return default
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}. "
                f"Check AWS credentials, IAM permissions, and network connectivity."
            )

    def get_int(self, key: str, default: int) -> int:
        """
        Get configuration value as integer.

        Falls back to the default (with a warning) when the value cannot be parsed.
        """
        value = self.get(key, str(default))
        try:
            return int(value)
        except (ValueError, TypeError) as e:
            logging.warning(
                f"Invalid integer for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return default


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


# Global configuration instance
config = Config()


# Document store (SQLAlchemy). DB_URL wins when set, otherwise MySQL from parts.
DB_URL = config.get('DB_URL', '')
DB_HOST = config.get('DB_HOST', 'localhost')
DB_PORT = config.get_int('DB_PORT', 3306)
DB_NAME = config.get('DB_NAME', 'themepark_waits')
DB_USER = config.get('DB_USER', 'root')
DB_PASSWORD = config.get('DB_PASSWORD', '')

# ThemeParks.wiki API configuration
THEMEPARKS_API_URL = config.get('THEMEPARKS_API_URL', 'https://api.themeparks.wiki/v1')
THEMEPARKS_API_KEY = config.get('THEMEPARKS_API_KEY', '')
RESORT_NAME = config.get('RESORT_NAME', 'Disneyland Resort')

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Polling cadence
POLL_INTERVAL_MINUTES = config.get_int('POLL_INTERVAL_MINUTES', 10)
ACTIVE_POLL_MINUTES = config.get_int('ACTIVE_POLL_MINUTES', 15)
LOW_ACTIVITY_POLL_MINUTES = config.get_int('LOW_ACTIVITY_POLL_MINUTES', 30)

# Below this many OPERATING rides nothing is persisted (parks not open yet)
MIN_OPERATING_RIDES = config.get_int('MIN_OPERATING_RIDES', 5)

# Persistence settings
SNAPSHOT_COLLECTION = config.get('SNAPSHOT_COLLECTION', 'fetchedData')
WAIT_TIME_SOURCE = config.get('WAIT_TIME_SOURCE', 'themeparks.wiki')
MAX_SLUG_SUFFIX_ATTEMPTS = config.get_int('MAX_SLUG_SUFFIX_ATTEMPTS', 1000)

# HTTP settings
FETCH_MAX_WORKERS = config.get_int('FETCH_MAX_WORKERS', 4)
MAX_RETRY_ATTEMPTS = config.get_int('MAX_RETRY_ATTEMPTS', 3)
RETRY_BACKOFF_MULTIPLIER = config.get_int('RETRY_BACKOFF_MULTIPLIER', 2)

# Health server
HEALTH_PORT = config.get_int('HEALTH_PORT', 3000)

# Database connection pool settings
DB_POOL_SIZE = 5
DB_POOL_MAX_OVERFLOW = 10
DB_POOL_RECYCLE = 3600  # Recycle connections after 1 hour
DB_POOL_PRE_PING = True  # Health check connections before use
