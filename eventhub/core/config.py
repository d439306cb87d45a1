# eventhub/core/config.py

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come straight from the process environment (Docker Compose, Vercel, CI).
    model_config = SettingsConfigDict(extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    DATABASE_URL_PROD: str = ""
    DATABASE_URL_LOCAL: str

    # Secrets
    JWT_SECRET: str
    CRON_SECRET: str
    RAZORPAY_KEY_ID: str
    RAZORPAY_KEY_SECRET: str
    RAZORPAY_WEBHOOK_SECRET: str
    RAZORPAY_API_BASE_URL: str = "https://api.razorpay.com/v1"
    RESEND_API_KEY: str = ""
    RESEND_FROM_EMAIL: str = "Community Events <events@example.com>"

    # Business rules
    DAILY_SUBMISSION_LIMIT: int = 3
    REVIEW_WINDOW_DAYS: int = 7
    MIN_REJECTION_REASON_LENGTH: int = 10
    PAYMENT_CURRENCY: str = "INR"
    DEFAULT_EVENT_IMAGE_URL: str = "/images/default-event-image.png"

    # Runtime toggles
    SCHEDULER_ENABLED: bool = False
    RATE_LIMIT_ENABLED: bool = True
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )


# Create a single instance of the settings
settings = Settings()
