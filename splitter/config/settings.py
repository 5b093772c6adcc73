from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from splitter.utils.constants import DEFAULT_GROUP_SIZE, SettlementScheme


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Bot settings
    bot_token: str = Field(..., alias="BOT_TOKEN")

    # Database settings
    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    db_name: str = Field(default="roommate_splitter", alias="DB_NAME")
    db_user: str = Field(default="postgres", alias="DB_USER")
    db_password: str = Field(..., alias="DB_PASSWORD")

    # Redis settings (optional)
    redis_host: str = Field(default="localhost", alias="REDIS_HOST")
    redis_port: int = Field(default=6379, alias="REDIS_PORT")
    redis_db: int = Field(default=0, alias="REDIS_DB")

    # Application settings
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Splitting settings
    group_size: int = Field(default=DEFAULT_GROUP_SIZE, alias="GROUP_SIZE")
    default_currency: str = Field(default="AED", alias="DEFAULT_CURRENCY")
    settlement_scheme: SettlementScheme = Field(
        default=SettlementScheme.SELF,
        alias="SETTLEMENT_SCHEME"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("group_size")
    @classmethod
    def check_group_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("GROUP_SIZE must be a positive integer")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def database_url(self) -> str:
        """Construct database URL from components."""
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def redis_url(self) -> str:
        """Construct Redis URL."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


# Global settings instance
settings = Settings()
