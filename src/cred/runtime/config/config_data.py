"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


def _blank_to_none(value: object) -> object:
    """Treat empty strings coming out of ``${VAR:-}`` substitutions as unset."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class FirebaseConfig(BaseModel):
    """Firebase Admin SDK configuration."""

    credentials_file: str | None = Field(
        default=None,
        description="Path to the service account JSON (GOOGLE_APPLICATION_CREDENTIALS)",
    )
    project_id: str | None = Field(
        default=None, description="Project id override; read from credentials if unset"
    )
    database_id: str = Field(
        default="(default)", description="Firestore database id"
    )
    app_name: str = Field(
        default="[DEFAULT]", description="Name of the firebase_admin App instance"
    )

    @field_validator("credentials_file", "project_id", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        return _blank_to_none(value)


class AuthConfig(BaseModel):
    """Authentication behaviour for the /auth routes."""

    admin_claim: str = Field(
        default="admin", description="Custom claim that marks administrators"
    )
    check_revoked: bool = Field(
        default=True, description="Check token revocation when verifying ID tokens"
    )
    session_expires_in_ms: int = Field(
        default=5 * 24 * 60 * 60 * 1000,
        description="Default session cookie lifetime in milliseconds (5 days)",
    )
    list_users_default: int = Field(
        default=100, description="Default page size for listing users"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    @field_validator("file", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        return _blank_to_none(value)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int | None = Field(default=None, description="Application port")
    title: str = Field(default="CRED", description="Site title")
    description: str = Field(
        default="A FastAPI backend for the CRED sites",
        description="Site description used in the root layout",
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @field_validator("port", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        return _blank_to_none(value)


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    firebase: FirebaseConfig = Field(
        default_factory=FirebaseConfig, description="Firebase configuration"
    )
    auth: AuthConfig = Field(
        default_factory=AuthConfig, description="Authentication configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
