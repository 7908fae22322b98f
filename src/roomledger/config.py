from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roomledger.utils.money import decimal_places


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ROOMLEDGER_",
        case_sensitive=False,
    )

    minor_units: int = Field(100, gt=0)
    currency_symbol: str = "₨"
    settlement_tolerance: int = Field(100, ge=0)
    max_amount: int = Field(99_999_999_999, gt=0)
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("minor_units")
    @classmethod
    def _power_of_ten(cls, value: int) -> int:
        decimal_places(value)
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
