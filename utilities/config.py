"""
Configuration management using environment variables.
Each service builds its settings object once at startup and passes it on.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_LOG_FORMATS = ['json', 'console']


class ServiceConfig(BaseSettings):
    """
    Settings shared by the backend and the frontend service.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    server_port: int = Field(default=8080, description="Listening port")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # Development/Testing
    debug: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from .env
    )

    @field_validator('server_port')
    @classmethod
    def validate_port(cls, v):
        """Ensure the port is a valid TCP port."""
        if v < 1 or v > 65535:
            raise ValueError('server_port must be between 1 and 65535')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f'log_level must be one of: {VALID_LOG_LEVELS}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        if v.lower() not in VALID_LOG_FORMATS:
            raise ValueError(f'log_format must be one of: {VALID_LOG_FORMATS}')
        return v.lower()

    def effective_log_level(self) -> str:
        """Debug mode always logs at DEBUG."""
        return "DEBUG" if self.debug else self.log_level


class ServerConfig(ServiceConfig):
    """Backend service settings: REST API over MongoDB."""

    # MongoDB Configuration
    database_uri: str = Field(default="mongodb://localhost:27017")
    db_name: str = Field(default="exercise-3")
    collection_name: str = Field(default="information")
    connect_timeout: float = Field(default=10.0, description="Startup connection timeout in seconds")

    @field_validator('database_uri', 'db_name', 'collection_name')
    @classmethod
    def validate_not_empty(cls, v):
        """Database settings must not be blank."""
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @field_validator('connect_timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('connect_timeout must be positive')
        return v

    def get_server_selection_timeout_ms(self) -> int:
        """Connection timeout in the unit the MongoDB driver expects."""
        return int(self.connect_timeout * 1000)


class FrontendConfig(ServiceConfig):
    """Frontend service settings: HTML views proxied to the backend."""

    server_port: int = Field(default=3030, description="Listening port")

    # Backend API Configuration
    api_uri: str = Field(default="http://server:8080")
    request_timeout: float = Field(default=10.0)

    @field_validator('api_uri')
    @classmethod
    def validate_api_uri(cls, v):
        """Strip the trailing slash so paths can be appended directly."""
        if not v.startswith(("http://", "https://")):
            raise ValueError('api_uri must be an http(s) URL')
        return v.rstrip("/")

    @field_validator('request_timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('request_timeout must be positive')
        return v
