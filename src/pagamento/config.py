"""Application configuration loaded from environment variables.

Values come from the process environment and, when present, a local
``.env`` file. Field names map to upper-case variables (``port`` reads
``PORT``, ``mercado_pago_access_token`` reads ``MERCADO_PAGO_ACCESS_TOKEN``).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Server ---
    port: int = Field(default=8080, description="TCP listen port")
    env: str = Field(default="production", description="production or development")
    log_level: str = Field(default="INFO")

    # --- Mercado Pago ---
    mercado_pago_access_token: str = Field(default="", repr=False)
    mercado_pago_pos_id: str = ""
    mercado_pago_webhook_secret: str = Field(
        default="",
        repr=False,
        description="HMAC key for webhook signatures; empty disables verification",
    )
    mercado_pago_base_url: str = "https://api.mercadopago.com"
    mercado_pago_timeout_seconds: float = Field(default=10.0, gt=0)

    # --- AWS ---
    dynamodb_table_name: str = "Payments"
    aws_region: str | None = None
    aws_endpoint: str | None = Field(
        default=None,
        description="Endpoint override for DynamoDB and SNS (e.g. LocalStack)",
    )
    aws_sns_topic_arn: str = ""
    aws_timeout_seconds: float = Field(default=5.0, gt=0)

    @property
    def is_development(self) -> bool:
        return self.env.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance."""
    return Settings()
