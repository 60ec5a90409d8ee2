from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="json",
        pattern="^(json|console|auto)$",
        description="Log renderer: json, console, or auto (console at DEBUG)",
    )

    # Price Source
    price_source_url: str = Field(
        default="https://interview.switcheo.com/prices.json",
        description="URL of the JSON price list ({currency, price} records)",
    )
    request_timeout_seconds: int = Field(default=10, description="Request timeout")

    # Swap Form Timing
    debounce_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Quiet period after the last edit before the buy amount is recomputed",
    )
    swap_latency_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Latency of the simulated swap execution",
    )
    success_reset_seconds: float = Field(
        default=3.0,
        ge=0,
        description="How long a successful swap stays visible before the form resets",
    )
    pair_swap_latency_seconds: float = Field(
        default=0.3,
        ge=0,
        description="Latency of flipping the sell/buy pair",
    )

    # Swap Execution
    swap_success_rate: float = Field(
        default=0.9,
        ge=0,
        le=1,
        description="Probability that the simulated executor reports success",
    )
    amount_max_decimals: int = Field(
        default=6,
        ge=0,
        description="Maximum fractional digits accepted in the sell amount and shown in the buy amount",
    )

    @property
    def has_price_source(self) -> bool:
        return bool(self.price_source_url)


# Global settings instance
settings = Settings()
