"""Application configuration via environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from .thaiid import ThaiIDConfig


class Settings(BaseSettings):
    auth_secret: str = "dev-secret"
    app_env: str = Field("development", validation_alias=AliasChoices("app_env", "node_env"))
    frontend_url: str = "http://localhost:3000"
    port: int = 9100
    database_url: str = ""  # Empty: in-memory stores
    login_audit: bool = True

    # ThaiID (DOPA Digital ID); legacy THAID_* names are still accepted
    thaiid_client_id: str = Field(
        "", validation_alias=AliasChoices("thaiid_client_id", "auth_thaiid_id", "thaid_client_id")
    )
    thaiid_client_secret: str = Field(
        "",
        validation_alias=AliasChoices(
            "thaiid_client_secret", "auth_thaiid_secret", "thaid_client_secret"
        ),
    )
    thaiid_token_url: str = Field(
        "", validation_alias=AliasChoices("thaiid_token_url", "auth_thaiid_token_url", "thaid_api_token")
    )
    thaiid_authorize_url: str = Field(
        "",
        validation_alias=AliasChoices(
            "thaiid_authorize_url", "auth_thaiid_authorize_url", "thaid_api_authorize"
        ),
    )
    thaiid_userinfo_url: str = Field(
        "",
        validation_alias=AliasChoices(
            "thaiid_userinfo_url", "auth_thaiid_userinfo_url", "thaid_api_userinfo"
        ),
    )
    thaiid_scope: str = Field(
        "pid", validation_alias=AliasChoices("thaiid_scope", "auth_thaiid_scope", "thaid_scope")
    )
    thaiid_api_key: str = Field(
        "", validation_alias=AliasChoices("thaiid_api_key", "auth_thaiid_api_key", "thaid_api_key")
    )
    thaiid_callback_url: str = Field(
        "",
        validation_alias=AliasChoices(
            "thaiid_callback_url", "auth_thaiid_callback", "thaid_callback_url"
        ),
    )

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def session_https_only(self) -> bool:
        return self.is_production

    def thaiid_config(self) -> ThaiIDConfig:
        return ThaiIDConfig(
            client_id=self.thaiid_client_id,
            client_secret=self.thaiid_client_secret,
            token_url=self.thaiid_token_url,
            authorize_url=self.thaiid_authorize_url,
            userinfo_url=self.thaiid_userinfo_url,
            scope=self.thaiid_scope or "pid",
            api_key=self.thaiid_api_key,
            callback_url=self.thaiid_callback_url,
        )

    model_config = {"env_prefix": "", "case_sensitive": False, "populate_by_name": True}


settings: Settings | None = None


def get_settings() -> Settings:
    global settings
    if settings is None:
        settings = Settings()
    return settings


def override_settings(s: Settings) -> None:
    """For testing: inject a Settings instance."""
    global settings
    settings = s
