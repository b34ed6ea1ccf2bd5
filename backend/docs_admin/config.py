from pydantic import PositiveInt, field_validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    # Bare SHA-256 hex digest (legacy) or "pbkdf2_sha256$rounds$salt$digest"
    admin_password_hash: str = ""
    admin_jwt_secret: str = ""
    environment: str = "development"

    # Login throttling
    login_window_seconds: PositiveInt = 10 * 60
    login_max_attempts: PositiveInt = 5
    login_lockout_seconds: PositiveInt = 30 * 60
    login_cleanup_interval: PositiveInt = 200

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("admin_password_hash", "admin_jwt_secret", "environment", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


config = AppConfig()
