from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "couponflow"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DATABASE_DSN: str = "sqlite:////tmp/couponflow.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Session tokens
    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    JWT_ACCESS_MINUTES: int = 720

    # Shared branch passwords (branch code -> 5-digit secret), override via env as JSON
    BRANCH_PASSWORDS: dict[str, str] = {
        "GDXC": "48291",
        "GDXR": "73058",
        "NWXC": "15947",
        "GNXC": "86420",
        "SWXC": "31769",
    }

    # Coupon lifecycle
    ISSUE_MAX_ATTEMPTS: int = 3
    VERIFY_MAX_ATTEMPTS: int = 5
    VERIFY_LOCKOUT_SECONDS: int = 600
    COUPON_LIST_MAX_LIMIT: int = 200

    # SOLAPI SMS provider
    SOLAPI_API_KEY: str = ""
    SOLAPI_API_SECRET: str = ""
    SOLAPI_FROM_NUMBER: str = ""
    SOLAPI_SEND_URL: str = "https://api.solapi.com/messages/v4/send-many/detail"
    SMS_TIMEOUT_SECONDS: float = 10.0

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def sms_enabled(self) -> bool:
        return bool(self.SOLAPI_API_KEY and self.SOLAPI_API_SECRET and self.SOLAPI_FROM_NUMBER)


settings = Settings()
