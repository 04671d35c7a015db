# /storeops/config/settings.py

import sys
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Mode
    mock_mode: bool = False

    # AI API
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = Field(default=400, ge=1, le=4096)

    # Shopify
    shopify_store_url: str | None = None
    shopify_access_token: str | None = None
    shopify_api_version: str = "2024-07"

    # WhatsApp
    whatsapp_access_token: str | None = None
    whatsapp_phone_id: str | None = None
    whatsapp_verify_token: str | None = None
    whatsapp_app_secret: str | None = None

    # Deployment
    environment: str = "production"
    api_version: str = "v1"
    rate_limit_per_minute: int = 100
    log_level: str = "INFO"

    # ---------------- Validators ---------------- #

    @field_validator("mock_mode", mode="before")
    @classmethod
    def parse_mock_mode(cls, v):
        """
        Only the literal string "true" (any case) enables mock mode, so values
        like "1" or "yes" left over in an env file keep the bot live.
        """
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return bool(v)

    @field_validator("shopify_store_url")
    @classmethod
    def strip_scheme(cls, v):
        if v is None:
            return v
        return v.replace("https://", "").replace("http://", "").rstrip("/")


def validate_environment(settings_obj: Settings):
    try:
        if not settings_obj.mock_mode:
            for var in ["shopify_store_url", "shopify_access_token"]:
                if not getattr(settings_obj, var):
                    raise ValueError(f"{var.upper()} is required when MOCK_MODE is off")

        return settings_obj

    except Exception as e:
        print(f"--- [ERROR] Environment validation failed: {e}")
        sys.exit(1)


settings = Settings()
validate_environment(settings)
