from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"
    DATABASE_URL: str | None = None

    # Creditor profile used when a request does not carry its own
    BILLING_CREDITOR_NAME: str | None = None
    BILLING_CREDITOR_ADDRESS: str | None = None
    BILLING_CREDITOR_IBAN: str | None = None

    QR_DEFAULT_CURRENCY: str = "CHF"
    QR_MESSAGE_TEMPLATE: str = "Rechnung {number}"
    QR_BORDER: int = 1
    QR_BOX_SIZE: int = 10
    QR_BILL_LANGUAGE: str = "de"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
