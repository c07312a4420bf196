"""Pydantic models for config validation.

``Config.validated()`` returns a typed ``PayoffKitConfig``. The defaults here
are also the built-in defaults of ``Config`` itself.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SimulationConfig(BaseModel):
    """Iteration limits shared by every month-by-month simulator."""

    max_months: int = Field(1200, gt=0)


class CreditCardConfig(BaseModel):
    """Default minimum-payment rule for credit card payoff."""

    minimum_payment_percent: float = Field(2.0, gt=0, le=100)
    minimum_payment_floor: float = Field(25.0, ge=0)


class MortgageConfig(BaseModel):
    """Mortgage and affordability assumptions."""

    pmi_ltv_threshold: float = Field(80.0, gt=0, lt=100)
    front_end_ratio: float = Field(28.0, gt=0, le=100)
    back_end_ratio: float = Field(36.0, gt=0, le=100)

    @model_validator(mode="after")
    def _front_end_within_back_end(self) -> MortgageConfig:
        if self.front_end_ratio > self.back_end_ratio:
            raise ValueError(
                f"front_end_ratio ({self.front_end_ratio}) cannot exceed back_end_ratio ({self.back_end_ratio})"
            )
        return self


class LoggingConfig(BaseModel):
    """Log level, plus an optional rotating log file."""

    level: str = "WARNING"
    file: str | None = None
    rotation: str = "10 MB"
    retention: str = "7 days"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v!r}")
        return level


class PayoffKitConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    simulation: SimulationConfig = SimulationConfig()
    credit_card: CreditCardConfig = CreditCardConfig()
    mortgage: MortgageConfig = MortgageConfig()
    logging: LoggingConfig = LoggingConfig()
