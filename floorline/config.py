from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "postgresql+asyncpg://floorline:floorline_dev@db:5432/floorline"
    DATABASE_ECHO: bool = False

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Scheduling
    # Hour attached to date-only appointment values
    APPOINTMENT_TIME_OF_DAY: int = 12

    # Display
    CURRENCY_SYMBOL: str = "$"

    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
