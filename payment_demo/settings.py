import os
from typing import Optional

from dotenv import load_dotenv

from payment_demo.exceptions import PaymentConfigurationError

# Load .env file variables into environment
load_dotenv(verbose=True)


class Settings:
    """Payment demo configuration settings loaded from environment variables."""

    # --- Defaults ---
    DEFAULT_PROCESSING_SECONDS: float = 2.0
    DEFAULT_RETRY_INTERVAL_SECONDS: float = 0.5
    DEFAULT_MAX_PRESENTATION_ATTEMPTS: int = 20
    DEFAULT_ANNOUNCE_DELAY_SECONDS: float = 0.5
    DEFAULT_BANNER_SECONDS: float = 8.0

    def _get_seconds(self, name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            value = float(raw)
        except ValueError:
            raise PaymentConfigurationError(f"{name} environment variable must be a number.")
        if value < 0:
            raise PaymentConfigurationError(f"{name} environment variable must not be negative.")
        return value

    # --- Session timing ---
    def get_processing_seconds(self) -> float:
        """Returns the fixed duration of the simulated processing stage."""
        return self._get_seconds("PAYMENT_PROCESSING_SECONDS", self.DEFAULT_PROCESSING_SECONDS)

    def get_retry_interval_seconds(self) -> float:
        """Returns the backoff between attempts to present the summary on a busy surface."""
        return self._get_seconds("PAYMENT_RETRY_INTERVAL_SECONDS", self.DEFAULT_RETRY_INTERVAL_SECONDS)

    def get_max_presentation_attempts(self) -> Optional[int]:
        """Returns the presentation attempt limit, or None when retries are unbounded (set to 0)."""
        raw = os.getenv("PAYMENT_MAX_PRESENTATION_ATTEMPTS")
        if raw is None or raw.strip() == "":
            return self.DEFAULT_MAX_PRESENTATION_ATTEMPTS
        try:
            value = int(raw)
        except ValueError:
            raise PaymentConfigurationError("PAYMENT_MAX_PRESENTATION_ATTEMPTS environment variable must be an integer.")
        if value < 0:
            raise PaymentConfigurationError("PAYMENT_MAX_PRESENTATION_ATTEMPTS environment variable must not be negative.")
        return value or None

    # --- Overlay ---
    def get_announce_delay_seconds(self) -> float:
        """Returns the delay between completing a successful payment and showing the banner."""
        return self._get_seconds("PAYMENT_ANNOUNCE_DELAY_SECONDS", self.DEFAULT_ANNOUNCE_DELAY_SECONDS)

    def get_banner_seconds(self) -> float:
        """Returns how long the success banner stays visible."""
        return self._get_seconds("PAYMENT_BANNER_SECONDS", self.DEFAULT_BANNER_SECONDS)

    # --- Logging Settings ---
    def get_log_level(self, default: str = "INFO") -> str:
        """Gets the configured log level, defaulting if not set."""
        return os.getenv("LOG_LEVEL", default).upper()
