"""Configuration management using pydantic-settings."""

from functools import lru_cache
import json
from pathlib import Path
from typing import Iterable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Document header defaults (used when the input leaves them empty)
    default_customization_id: str = Field(
        default="urn:cen.eu:en16931:2017#compliant#urn:fdc:peppol.eu:2017:poacc:billing:3.0",
        description="CustomizationID written when the document does not carry one",
    )
    default_profile_id: str = Field(
        default="urn:fdc:peppol.eu:2017:poacc:billing:01:1.0",
        description="ProfileID written when the document does not carry one",
    )

    # Payment means (UNCL4461 code)
    payment_means_code: str = Field(
        default="1",
        description="PaymentMeansCode for the payee financial account",
    )

    # Attachments
    attachment_classification_id: str = Field(
        default="UBL.BE",
        description="ID of the fixed classification document reference",
    )
    attachment_classification_description: str = Field(
        default="CommercialInvoice",
        description="DocumentDescription of the fixed classification document reference",
    )
    max_attachment_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum embedded attachment size in MB",
    )

    # Output self-check
    validate_output: bool = Field(
        default=False,
        description="Run the offline validators on every generated document",
    )
    invoice_xsd_path: Path | None = Field(
        default=None,
        description="Path to UBL-Invoice-2.1.xsd for full schema validation",
    )
    credit_note_xsd_path: Path | None = Field(
        default=None,
        description="Path to UBL-CreditNote-2.1.xsd for full schema validation",
    )

    # Logging
    log_level: str = Field(default="INFO")

    # Server Settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    # CORS
    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Comma-separated list of allowed CORS origins",
    )

    @staticmethod
    def _split_csv(value: str) -> list[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, value: str | Iterable[str]) -> list[str]:
        """Allow comma-separated env strings for CORS origins."""
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return []
            # Try JSON (e.g., '["https://foo"]'); if it fails, fall back to CSV.
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError:
                return cls._split_csv(text)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
            return cls._split_csv(text)
        return list(value)

    @property
    def max_attachment_size_bytes(self) -> int:
        """Maximum attachment size in bytes."""
        return self.max_attachment_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
