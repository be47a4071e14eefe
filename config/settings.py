"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    default_financial_year: str = "2023-2024"
    deduction_limits_file: str = "deduction_limits.yaml"
    auth_username: str = ""
    auth_password: str = ""
    log_level: str = "INFO"

    @property
    def auth_enabled(self) -> bool:
        """Basic Auth is enforced only when both credentials are set."""
        return bool(self.auth_username and self.auth_password)

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
