"""
GameEcon Configuration.

Pydantic Settings v2: loads from .env, environment variables.
Engines keep their own module-level defaults; these settings are wired into
engine constructors by `gameecon.services.registry`.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "GameEcon"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # ── Operational ──────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")  # json or console
    random_seed: int | None = Field(default=None, alias="GAMEECON_RANDOM_SEED")

    # ── Achievement Engine ───────────────────────────────────────────────
    achievement_probability_cap: float = Field(
        default=75.0, alias="ACHIEVEMENT_PROBABILITY_CAP",
        description="Hard ceiling on milestone success chance, in percentage points",
    )
    learning_curve_step: float = Field(default=1.5, alias="LEARNING_CURVE_STEP")
    learning_curve_cap: float = Field(default=10.0, alias="LEARNING_CURVE_CAP")

    # ── Credit & Loans ───────────────────────────────────────────────────
    loan_min_credit_score: int = Field(default=600, alias="LOAN_MIN_CREDIT_SCORE")
    loan_max_debt_to_equity: float = Field(default=3.0, alias="LOAN_MAX_DEBT_TO_EQUITY")
    loan_revenue_coverage: float = Field(default=5.0, alias="LOAN_REVENUE_COVERAGE")
    loan_cash_coverage: float = Field(default=3.0, alias="LOAN_CASH_COVERAGE")
    interest_rate_floor: float = Field(default=5.0, alias="INTEREST_RATE_FLOOR")
    interest_rate_ceiling: float = Field(default=15.0, alias="INTEREST_RATE_CEILING")

    # ── Marketplace ──────────────────────────────────────────────────────
    compute_base_rate: float = Field(
        default=0.10, alias="COMPUTE_BASE_RATE",
        description="USD per TFLOPS per hour",
    )

    # ── Emissions ────────────────────────────────────────────────────────
    ghg_reporting_threshold_tons: float = Field(default=25_000.0, alias="GHG_REPORTING_THRESHOLD")
    cap_and_trade_threshold_tons: float = Field(default=50_000.0, alias="CAP_AND_TRADE_THRESHOLD")
    major_source_threshold_tons: float = Field(default=100_000.0, alias="MAJOR_SOURCE_THRESHOLD")


settings = Settings()
