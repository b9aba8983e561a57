# -*- coding: utf-8 -*-
from pathlib import Path
from typing import Literal, Optional

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_KUBECONFIG = Path.home() / ".kube" / "config"


class Settings(BaseSettings):
    """
    Process configuration loaded from environment variables or .env file.
    """

    namespace: str = Field(
        "default",
        validation_alias="NAMESPACE",
        description="Namespace whose pods are watched and remediated.",
    )
    port: int = Field(
        8080,
        validation_alias="PORT",
        description="Bind port for the /healthz liveness endpoint.",
        ge=1,
        le=65535,
    )
    kubeconfig: Optional[Path] = Field(
        None,
        validation_alias="KUBECONFIG",
        description="Local kubeconfig used when no in-cluster identity is available.",
    )
    log_level: LogLevel = Field("INFO", validation_alias="LOG_LEVEL")

    delete_timeout_seconds: float = Field(
        10.0,
        validation_alias="DELETE_TIMEOUT_SECONDS",
        description="Upper bound (seconds) for a single pod deletion request.",
        gt=0.0,
    )
    shutdown_grace_seconds: float = Field(
        5.0,
        validation_alias="SHUTDOWN_GRACE_SECONDS",
        description="Time (seconds) the liveness endpoint gets to drain on shutdown.",
        gt=0.0,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level_case_insensitive(cls, value: str) -> str:
        """Ensure log level is uppercase before validation."""
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("namespace", mode="before")
    @classmethod
    def default_blank_namespace(cls, value: Optional[str]) -> str:
        # An exported but empty NAMESPACE behaves as if it were unset.
        if value is None or (isinstance(value, str) and not value.strip()):
            logger.debug("NAMESPACE is empty, falling back to 'default'")
            return "default"
        return value.strip()

    @field_validator("port", mode="before")
    @classmethod
    def default_blank_port(cls, value):
        if isinstance(value, str) and not value.strip():
            return 8080
        return value

    @field_validator("kubeconfig", mode="before")
    @classmethod
    def blank_kubeconfig_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def kubeconfig_path(self) -> Path:
        """Kubeconfig location to try, falling back to ~/.kube/config."""
        return self.kubeconfig.expanduser() if self.kubeconfig else DEFAULT_KUBECONFIG


# Singleton instance of settings for application-wide use.
settings = Settings()
