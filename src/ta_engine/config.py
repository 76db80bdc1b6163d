"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class NumSettings(BaseSettings):
    """Arithmetic context for Num values."""

    model_config = SettingsConfigDict(env_prefix="NUM_")

    precision: int = Field(default=32, ge=1)  # significant digits, ROUND_HALF_UP


class FixtureSettings(BaseSettings):
    """Layout of reference fixtures.

    Section headers are matched by substring against the first cell of a row,
    so "Date" also matches a header cell reading "Date (week end)".
    All fields configurable via FIXTURE_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="FIXTURE_")

    data_header: str = "Date"
    param_header: str = "Param"
    comment_marker: str = "//"
    param_column: int = Field(default=1, ge=0)  # parameters are written next to their label
    bar_period_days: int = Field(default=7, ge=1)  # reference sheets hold weekly bars


class VerificationSettings(BaseSettings):
    """Tolerance used when comparing computed values to reference data."""

    model_config = SettingsConfigDict(env_prefix="VERIFY_")

    epsilon: Decimal = Field(default=Decimal("0.0001"), ge=0)


class AppSettings(BaseSettings):
    """Root settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    num: NumSettings = NumSettings()
    fixture: FixtureSettings = FixtureSettings()
    verification: VerificationSettings = VerificationSettings()
