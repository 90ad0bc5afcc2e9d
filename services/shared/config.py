"""Service settings loaded from environment variables at process start."""

import os
from dataclasses import dataclass
from typing import Optional

DOG_API_URL = "https://dog.ceo/api/breeds/image/random"
WEATHER_API_URL = "https://api.openweathermap.org/data/2.5/weather"
SAMPLE_API_URL = "https://jsonplaceholder.typicode.com/users"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable process configuration."""
    service_name: str = "api-proxy"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    dog_api_url: str = DOG_API_URL
    weather_api_url: str = WEATHER_API_URL
    sample_api_url: str = SAMPLE_API_URL
    # Opaque secret; excluded from repr so it never lands in logs
    openweather_api_key: Optional[str] = None
    telemetry_enabled: bool = True
    otlp_endpoint: str = "http://localhost:4317"

    def __repr__(self) -> str:
        key_state = "set" if self.openweather_api_key else "unset"
        return (
            f"Settings(service_name={self.service_name!r}, port={self.port}, "
            f"openweather_api_key=<{key_state}>, "
            f"telemetry_enabled={self.telemetry_enabled})"
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            dog_api_url=os.getenv("DOG_API_URL", DOG_API_URL),
            weather_api_url=os.getenv("WEATHER_API_URL", WEATHER_API_URL),
            sample_api_url=os.getenv("SAMPLE_API_URL", SAMPLE_API_URL),
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY") or None,
            telemetry_enabled=_env_bool("TELEMETRY_ENABLED", True),
            otlp_endpoint=os.getenv(
                "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317"
            ),
        )
